"""Annotation registry: the ordered rule table.

Registration order is evaluation order for every field. The built-in
order puts the mutating rules first so constraint rules inspect the
post-substitution value::

    env -> default -> flags -> min -> max -> regex
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from confval.validation.errors import RuleConfigError
from confval.validation.rules import (
    DefaultRule,
    EnvRule,
    FlagsRule,
    MaxRule,
    MinRule,
    RegexRule,
    Rule,
)

logger = logging.getLogger(__name__)


class RuleRegistry:
    """Ordered mapping of annotation name to rule."""

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: dict[str, Rule] = {}
        for rule in rules:
            self.register(rule)

    def register(self, rule: Rule) -> None:
        """Append *rule* to the evaluation order.

        Raises:
            RuleConfigError: If a rule with the same name is registered.
        """
        if rule.name in self._rules:
            raise RuleConfigError(f"rule {rule.name!r} is already registered")
        self._rules[rule.name] = rule
        logger.debug("Registered rule: %s", rule.name)

    def lookup(self, name: str) -> Rule | None:
        """Return the rule bound to *name*, or None if no such rule exists."""
        return self._rules.get(name)

    def names(self) -> tuple[str, ...]:
        return tuple(self._rules)

    def __iter__(self) -> Iterator[tuple[str, Rule]]:
        return iter(self._rules.items())

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules


BUILTIN_RULES: tuple[type[Rule], ...] = (
    EnvRule,
    DefaultRule,
    FlagsRule,
    MinRule,
    MaxRule,
    RegexRule,
)


def default_registry() -> RuleRegistry:
    """Return a fresh registry holding the built-in rules in evaluation order."""
    return RuleRegistry(cls() for cls in BUILTIN_RULES)
