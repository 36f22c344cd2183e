"""String-to-value coercion and zero-value rules.

Parsing follows the conventions config files and environment variables
commonly use: integers accept ``0x``/``0o``/``0b`` prefixes and digit
separators, a bare leading ``0`` means octal (``0755``), booleans accept a
small fixed vocabulary.

Examples:
    >>> parse_int("0x1F")
    31
    >>> parse_bool("T")
    True
"""

from __future__ import annotations

from collections.abc import Sized
from typing import Any

from confval.domain.kinds import FieldKind

TRUE_WORDS: frozenset[str] = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_WORDS: frozenset[str] = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_int(text: str) -> int:
    """Parse a signed integer, honouring base prefixes.

    Raises:
        ValueError: If *text* is not an integer literal.
    """
    return _int_literal(text.strip())


def parse_uint(text: str) -> int:
    """Parse an unsigned integer. A leading sign is rejected."""
    stripped = text.strip()
    if stripped.startswith(("-", "+")):
        raise ValueError(f"unsigned integer cannot carry a sign: {text!r}")
    return _int_literal(stripped)


def _int_literal(text: str) -> int:
    digits = text.lstrip("+-")
    if len(digits) > 1 and digits[0] == "0" and (digits[1].isdigit() or digits[1] == "_"):
        return int(text, 8)
    return int(text, 0)


def parse_float(text: str) -> float:
    return float(text.strip())


def parse_bool(text: str) -> bool:
    if text in TRUE_WORDS:
        return True
    if text in FALSE_WORDS:
        return False
    raise ValueError(f"invalid boolean literal: {text!r}")


_PARSERS = {
    FieldKind.INT: parse_int,
    FieldKind.UINT: parse_uint,
    FieldKind.FLOAT: parse_float,
    FieldKind.STR: str,
    FieldKind.BOOL: parse_bool,
}


def parse_scalar(text: str, kind: FieldKind) -> Any:
    """Parse *text* into a value of *kind*.

    Raises:
        ValueError: If *text* does not parse for *kind*.
        KeyError: If *kind* has no scalar parser (records, containers).
    """
    return _PARSERS[kind](text)


def is_zero(value: Any) -> bool:
    """Return True for the zero value of a field.

    ``None``, ``""``, ``0``, ``0.0``, ``False`` and empty containers are
    zero. Records and other objects are never zero.
    """
    if value is None:
        return True
    if isinstance(value, (bool, int, float)):
        return not value
    if isinstance(value, (str, bytes)) or isinstance(value, Sized):
        return len(value) == 0
    return False
