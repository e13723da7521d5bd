"""URL template expansion.

Templates contain ``{name}`` tokens (whitespace inside the braces is
ignored). :func:`expand` resolves them left to right from a data mapping
and *removes* every key it uses, so the path variables consumed by a URL
are not sent again as query or body parameters.

Example::

    >>> data = {"base": "http://x", "id": 5, "page": 2}
    >>> expand("{base}/posts/{ id }.json", data)
    'http://x/posts/5.json'
    >>> data
    {'page': 2}
"""

from __future__ import annotations

import re
from typing import Any, MutableMapping

from crude.exceptions import MissingVariableError

_TOKEN_RE = re.compile(r"\{ *([^} ]+) *\}")


def expand(template: str, data: MutableMapping[str, Any]) -> str:
    """Substitute every ``{key}`` token in *template* from *data*.

    Each key is popped from *data* as it is used, so the same key cannot be
    used twice in one template.

    Args:
        template: String containing ``{key}`` tokens.
        data: Values for the tokens. Mutated in place.

    Returns:
        The expanded string.

    Raises:
        MissingVariableError: If a token has no value in *data*, including
            the second occurrence of an already consumed key.
    """

    def _substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in data:
            raise MissingVariableError(key, template)
        return str(data.pop(key))

    return _TOKEN_RE.sub(_substitute, template)


def template_variables(template: str) -> list[str]:
    """Return the token names of *template* in order of appearance."""
    return _TOKEN_RE.findall(template)
