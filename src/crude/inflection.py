"""English pluralization for resource names.

A :class:`Pluralizer` holds an ordered list of :class:`PluralRule` objects.
Rules are tested in *reverse* declaration order and the first match wins,
so a rule appended with :meth:`Pluralizer.add_rule` overrides every rule
declared before it. The built-in list goes from the generic catch-all
(append ``s``) to the most specific irregular form (``child``), which is
why the generic rule is consulted last.

A rule pattern is either:

* a plain string -- matched by exact equality, the replacement is returned
  as the whole plural; or
* a compiled regular expression -- the first match is substituted with the
  replacement, which may reference groups as ``\\1``. Groups that did not
  participate in the match expand to the empty string.

Example::

    >>> pluralize("city")
    'cities'
    >>> p = Pluralizer()
    >>> p.add_rule("person", "people")
    PluralRule(pattern='person', replacement='people')
    >>> p.pluralize("person")
    'people'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Pattern, Union

RulePattern = Union[str, Pattern[str]]


@dataclass(frozen=True)
class PluralRule:
    """One pluralization rule: an exact word or a regex, plus its replacement."""

    pattern: RulePattern
    replacement: str

    def apply(self, name: str) -> Optional[str]:
        """Return the plural of *name* if this rule matches, else ``None``."""
        if isinstance(self.pattern, str):
            return self.replacement if name == self.pattern else None
        if self.pattern.search(name) is None:
            return None
        return self.pattern.sub(self.replacement, name, count=1)


DEFAULT_RULES: tuple[PluralRule, ...] = (
    PluralRule(re.compile(r"$"), "s"),
    PluralRule(re.compile(r"s$", re.IGNORECASE), "s"),
    PluralRule(re.compile(r"(?:([^f])fe|([lr])f)$", re.IGNORECASE), r"\1\2ves"),
    PluralRule(re.compile(r"([^aeiouy]|qu)y$", re.IGNORECASE), r"\1ies"),
    PluralRule(re.compile(r"(x|ch|ss|sh|us)$", re.IGNORECASE), r"\1es"),
    PluralRule("child", "children"),
)
"""Built-in rules, from lowest to highest priority."""


class Pluralizer:
    """Ordered, extensible set of pluralization rules.

    Args:
        rules: Initial rules, lowest priority first. Defaults to
            :data:`DEFAULT_RULES`.
    """

    def __init__(self, rules: Optional[Iterable[PluralRule]] = None) -> None:
        self._rules: list[PluralRule] = list(DEFAULT_RULES if rules is None else rules)

    @property
    def rules(self) -> tuple[PluralRule, ...]:
        """The current rules, lowest priority first."""
        return tuple(self._rules)

    def add_rule(self, pattern: RulePattern, replacement: str) -> PluralRule:
        """Append a rule with the highest priority.

        Args:
            pattern: An exact word, or a compiled regular expression.
            replacement: The plural (for words) or the substitution string
                (for regexes, ``\\1``-style group references allowed).

        Returns:
            The rule that was added.
        """
        rule = PluralRule(pattern, replacement)
        self._rules.append(rule)
        return rule

    def add_regex(
        self, pattern: str, replacement: str, ignore_case: bool = True
    ) -> PluralRule:
        """Compile *pattern* and append it as the highest-priority rule."""
        flags = re.IGNORECASE if ignore_case else 0
        return self.add_rule(re.compile(pattern, flags), replacement)

    def pluralize(self, name: str) -> str:
        """Return the plural form of *name*.

        Never fails: with the default rules the catch-all always matches,
        and with a custom rule list that matches nothing the name is
        returned unchanged.
        """
        for rule in reversed(self._rules):
            plural = rule.apply(name)
            if plural is not None:
                return plural
        return name

    __call__ = pluralize

    def copy(self) -> Pluralizer:
        """Return an independent pluralizer with the same rules."""
        return Pluralizer(self._rules)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rules={len(self._rules)})"


DEFAULT_PLURALIZER = Pluralizer()
"""Process-wide pluralizer used when an :class:`~crude.root.Api` is not given its own."""


def pluralize(name: str, pluralizer: Optional[Pluralizer] = None) -> str:
    """Pluralize *name* with *pluralizer* (default: :data:`DEFAULT_PLURALIZER`)."""
    return (pluralizer or DEFAULT_PLURALIZER).pluralize(name)


def capitalize(text: str) -> str:
    """Upper-case the first character of *text* and leave the rest untouched.

    Unlike :meth:`str.capitalize`, ``"blogPost"`` stays ``"BlogPost"``.
    """
    return text[:1].upper() + text[1:]
