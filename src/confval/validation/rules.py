"""Built-in rules: env, default, flags, min, max, regex.

A rule receives its raw annotation argument and the bound field. It either
returns normally (possibly after assigning the field) or raises
:class:`RuleFailure`, which the walker records against the field path.

Mutating rules (``env``, ``default``) assign the field and therefore
require it to be settable; inspecting rules only read it.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Sized
from dataclasses import dataclass, field
from typing import Any, ClassVar

from confval.domain.coercion import is_zero, parse_float, parse_int, parse_scalar, parse_uint
from confval.domain.kinds import SCALAR_KINDS, FailureKind, FieldKind
from confval.validation.descriptors import BoundField
from confval.validation.errors import RuleConfigError, RuleFailure, ValidatorMisuseError

logger = logging.getLogger(__name__)

Lookup = Callable[[str], "str | None"]


@dataclass
class RuleContext:
    """Per-walk state shared by the rules.

    Attributes:
        lookup: Environment collaborator used by the ``env`` rule.
        env_sourced: Paths of fields assigned from the environment during
            this walk; ``default`` leaves them alone.
    """

    lookup: Lookup
    env_sourced: set[str] = field(default_factory=set)


class Rule(ABC):
    """A named, stateless validation or mutation step."""

    name: ClassVar[str]
    mutates: ClassVar[bool] = False

    @abstractmethod
    def apply(self, argument: str, target: BoundField, ctx: RuleContext) -> None:
        """Check or fill *target*; raise :class:`RuleFailure` on failure."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


# --- Mutating rules ---


class _SourcingRule(Rule):
    """Shared parse-and-assign logic for rules that fill a field."""

    mutates = True
    failure_kind: ClassVar[FailureKind]

    def _require_settable(self, target: BoundField) -> None:
        if not target.settable:
            raise ValidatorMisuseError(
                f"validator: using `{self.name}` validator with unsettable field {target.path}"
            )

    def _assign(self, text: str, target: BoundField) -> None:
        if target.kind not in SCALAR_KINDS:
            raise RuleFailure(
                FailureKind.UNSUPPORTED_TYPE, f"invalid type for `{self.name}` validator"
            )
        try:
            value = parse_scalar(text, target.kind)
        except ValueError:
            raise RuleFailure(self.failure_kind, f"invalid `{self.name}` value {text}") from None
        target.assign(value)


class EnvRule(_SourcingRule):
    """Overwrite the field from an environment variable when it is set and non-empty."""

    name = "env"
    failure_kind = FailureKind.INVALID_ENV

    def apply(self, argument: str, target: BoundField, ctx: RuleContext) -> None:
        self._require_settable(target)
        raw = ctx.lookup(argument)
        if not raw:
            return
        self._assign(raw, target)
        ctx.env_sourced.add(target.path)
        logger.debug("Sourced %s from environment variable %s", target.path, argument)


class DefaultRule(_SourcingRule):
    """Fill an absent or zero-valued field with a literal.

    Fields already sourced from the environment in this walk are kept.
    """

    name = "default"
    failure_kind = FailureKind.INVALID_DEFAULT

    def apply(self, argument: str, target: BoundField, ctx: RuleContext) -> None:
        self._require_settable(target)
        if argument == "" or target.path in ctx.env_sourced:
            return
        if target.kind in SCALAR_KINDS and not is_zero(target.value):
            return
        self._assign(argument, target)
        logger.debug("Defaulted %s to %r", target.path, argument)


# --- Inspecting rules ---


class FlagsRule(Rule):
    """Comma-separated flags. Only ``required`` is defined."""

    name = "flags"
    known_flags: ClassVar[frozenset[str]] = frozenset({"required"})

    def apply(self, argument: str, target: BoundField, ctx: RuleContext) -> None:
        flags = [f.strip() for f in argument.split(",") if f.strip()]
        unknown = sorted(set(flags) - self.known_flags)
        if unknown:
            raise RuleConfigError(f"unknown flags {unknown} on field {target.path}")
        if "required" in flags and is_zero(target.value):
            raise RuleFailure(FailureKind.REQUIRED, "required value not filled")


def _measure(target: BoundField) -> tuple[FieldKind, Any] | None:
    """Resolve what a bound rule compares: ``(kind, number or length)``.

    Returns None for absent values, which bounds treat as satisfied.
    """
    value = target.value
    if value is None:
        return None
    if isinstance(value, bool):
        return FieldKind.BOOL, value
    if isinstance(value, int):
        if target.kind in (FieldKind.UINT, FieldKind.FLOAT):
            return target.kind, value
        return FieldKind.INT, value
    if isinstance(value, float):
        return FieldKind.FLOAT, value
    if isinstance(value, Sized):
        return FieldKind.SIZED, len(value)
    return FieldKind.OTHER, value


_BOUND_PARSERS: dict[FieldKind, Callable[[str], Any]] = {
    FieldKind.INT: parse_int,
    FieldKind.UINT: parse_uint,
    FieldKind.FLOAT: parse_float,
    FieldKind.SIZED: parse_uint,
}


class _BoundRule(Rule):
    """Shared logic for ``min`` and ``max``."""

    label: ClassVar[str]
    failure_kind: ClassVar[FailureKind]

    @abstractmethod
    def violates(self, actual: Any, bound: Any) -> bool: ...

    def apply(self, argument: str, target: BoundField, ctx: RuleContext) -> None:
        measured = _measure(target)
        if measured is None:
            return
        kind, actual = measured
        parser = _BOUND_PARSERS.get(kind)
        if parser is None:
            raise RuleFailure(FailureKind.UNSUPPORTED_TYPE, f"invalid type for {self.name} validator")
        try:
            bound = parser(argument)
        except ValueError:
            raise RuleConfigError(
                f"malformed `{self.name}` bound {argument!r} on field {target.path}"
            ) from None
        if not self.violates(actual, bound):
            return
        if kind is FieldKind.SIZED:
            shown, noun = str(actual), "length"
        elif kind is FieldKind.FLOAT:
            shown, noun = f"{actual:f}", "value"
        else:
            shown, noun = str(actual), "value"
        raise RuleFailure(
            self.failure_kind, f"invalid {noun}: {shown}, {self.label} value is {argument}"
        )


class MinRule(_BoundRule):
    name = "min"
    label = "minimum"
    failure_kind = FailureKind.BELOW_MINIMUM

    def violates(self, actual: Any, bound: Any) -> bool:
        return actual < bound


class MaxRule(_BoundRule):
    name = "max"
    label = "maximum"
    failure_kind = FailureKind.ABOVE_MAXIMUM

    def violates(self, actual: Any, bound: Any) -> bool:
        return actual > bound


class RegexRule(Rule):
    """Match string values against a pattern.

    A pattern that neither starts with ``^`` nor ends with ``$`` is wrapped
    in both anchors. A trailing ``$`` matches only at the very end of the
    value, never before a final newline.
    """

    name = "regex"

    @staticmethod
    def anchor(pattern: str) -> str:
        if not pattern.startswith("^") and not pattern.endswith("$"):
            return f"^{pattern}$"
        return pattern

    @staticmethod
    def _strict_end(pattern: str) -> str:
        stem = pattern[:-1]
        if pattern.endswith("$") and (len(stem) - len(stem.rstrip("\\"))) % 2 == 0:
            return stem + r"\Z"
        return pattern

    def apply(self, argument: str, target: BoundField, ctx: RuleContext) -> None:
        pattern = self.anchor(argument)
        try:
            compiled = re.compile(self._strict_end(pattern))
        except re.error:
            raise RuleFailure(FailureKind.INVALID_PATTERN, f"invalid regex: {pattern}") from None
        value = target.value
        if value is None:
            return
        if not isinstance(value, str):
            raise RuleFailure(FailureKind.UNSUPPORTED_TYPE, "invalid type for regex validator")
        if compiled.search(value) is None:
            raise RuleFailure(
                FailureKind.PATTERN_MISMATCH,
                f"invalid value: {value} does not match regex {pattern}",
            )
