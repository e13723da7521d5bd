"""Definition files, precedence resolution, and API construction.

The ``crude`` command works on an API declared in a JSON *definition*
file (see :class:`~crude.models.ApiDefinition`):

* **Locating** -- :func:`find_definition` picks the file by precedence:
  ``--definition`` flag, ``CRUDE_DEFINITION`` environment variable, then
  ``./crude.json``.
* **Loading / saving** -- :func:`load_definition` validates the JSON with
  Pydantic; :func:`save_definition` writes it atomically.
* **Overrides** -- :func:`resolve_definition` layers ``--base-url`` /
  ``--format`` flags and the ``CRUDE_BASE_URL`` / ``CRUDE_FORMAT``
  environment variables over the file.
* **Construction** -- :func:`build_api` turns a definition into a live
  :class:`~crude.root.Api` bound to a transport.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from crude.exceptions import ConfigError, CrudeError
from crude.inflection import Pluralizer
from crude.models import ApiDefinition
from crude.root import Api, Transport

logger = logging.getLogger(__name__)

DEFINITION_FILENAME = "crude.json"
ENV_DEFINITION = "CRUDE_DEFINITION"
ENV_BASE_URL = "CRUDE_BASE_URL"
ENV_FORMAT = "CRUDE_FORMAT"


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Definition files ---


def find_definition(explicit: Optional[str] = None) -> Path:
    """Locate the definition file.

    Precedence (high to low):
        1. *explicit* (the ``--definition`` flag)
        2. ``CRUDE_DEFINITION`` environment variable
        3. ``./crude.json``

    Raises:
        ConfigError: If the selected file does not exist.
    """
    candidate = explicit or os.environ.get(ENV_DEFINITION) or DEFINITION_FILENAME
    path = Path(candidate).expanduser()
    if not path.is_file():
        raise ConfigError(f"Definition file not found: {path} (create one with 'crude init')")
    return path


def load_definition(path: Path) -> ApiDefinition:
    """Load and validate a definition file.

    Raises:
        ConfigError: If the file is missing, is not valid JSON, or fails
            Pydantic validation.
    """
    if not path.is_file():
        raise ConfigError(f"Definition file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return ApiDefinition.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid definition at {path}: {exc}") from exc


def save_definition(definition: ApiDefinition, path: Path) -> None:
    """Persist *definition* atomically as indented JSON."""
    data = definition.model_dump(mode="json")
    _atomic_write(path, json.dumps(data, indent=2) + "\n")


def resolve_definition(
    cli_path: Optional[str] = None,
    cli_base_url: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> ApiDefinition:
    """Load the definition and apply overrides.

    ``base_url`` and ``format`` precedence (high to low): CLI flag,
    ``CRUDE_BASE_URL`` / ``CRUDE_FORMAT`` environment variable, file.
    An empty ``--format ""`` drops the suffix.
    """
    definition = load_definition(find_definition(cli_path))

    env_base_url = os.environ.get(ENV_BASE_URL)
    if cli_base_url is not None:
        definition.base_url = cli_base_url
    elif env_base_url:
        definition.base_url = env_base_url

    env_format = os.environ.get(ENV_FORMAT)
    if cli_format is not None:
        definition.format = cli_format
    elif env_format is not None:
        definition.format = env_format

    return definition


# --- API construction ---


def build_pluralizer(definition: ApiDefinition) -> Pluralizer:
    """Return a pluralizer with the built-in rules plus the definition's custom rules."""
    pluralizer = Pluralizer()
    for rule in definition.plural_rules:
        if rule.regex:
            pluralizer.add_regex(rule.pattern, rule.replacement, ignore_case=rule.ignore_case)
        else:
            pluralizer.add_rule(rule.pattern, rule.replacement)
    return pluralizer


def build_api(definition: ApiDefinition, transport: Transport) -> Api:
    """Declare every resource of *definition* on a new :class:`~crude.root.Api`.

    Resources are declared first, then nesting relations and actions are
    wired, so ``belongs_to`` may name resources declared later in the file.

    Raises:
        ConfigError: If a relation names an undeclared resource, or a
            declaration is rejected.
    """
    try:
        pluralizer = build_pluralizer(definition)
    except re.error as exc:
        raise ConfigError(f"Invalid plural rule: {exc}") from exc

    api = Api(definition.base_url, definition.format, transport, pluralizer)
    nodes = [api.resources(res.name, res.plural) for res in definition.resources]

    for res, node in zip(definition.resources, nodes):
        try:
            for parent_plural in res.belongs_to:
                if parent_plural not in api:
                    raise ConfigError(
                        f"Resource '{node.plural_name}' belongs to undeclared resource "
                        f"'{parent_plural}'"
                    )
                node.belongs_to(api[parent_plural])
            for action in res.member_actions:
                node.member_action(action.name, action.path, action.method)
            for action in res.collection_actions:
                node.collection_action(action.name, action.path, action.method)
        except ConfigError:
            raise
        except CrudeError as exc:
            raise ConfigError(f"Invalid resource '{node.plural_name}': {exc}") from exc

    logger.debug("Built API %s with %d resource(s)", definition.base_url, len(nodes))
    return api
