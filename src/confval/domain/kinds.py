"""Field kinds and well-known failure kinds.

A field kind classifies the declared type of a record field once, at
descriptor build time, so rules dispatch on the kind instead of
re-inspecting annotations on every call.
"""

from __future__ import annotations

from enum import StrEnum
from typing import NewType

UInt = NewType("UInt", int)
"""Marker for unsigned integer fields (``port: UInt = UInt(0)``)."""


class FieldKind(StrEnum):
    """Declared kind of a record field, with optionality stripped."""

    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    STR = "str"
    BOOL = "bool"
    RECORD = "record"
    SIZED = "sized"
    OTHER = "other"


NUMERIC_KINDS: frozenset[FieldKind] = frozenset({FieldKind.INT, FieldKind.UINT, FieldKind.FLOAT})
SCALAR_KINDS: frozenset[FieldKind] = NUMERIC_KINDS | {FieldKind.STR, FieldKind.BOOL}


class FailureKind(StrEnum):
    """Well-known failure categories, matched exactly by ``ValidationErrors.is_``."""

    REQUIRED = "required"
    BELOW_MINIMUM = "below_minimum"
    ABOVE_MAXIMUM = "above_maximum"
    PATTERN_MISMATCH = "pattern_mismatch"
    INVALID_PATTERN = "invalid_pattern"
    INVALID_ENV = "invalid_env"
    INVALID_DEFAULT = "invalid_default"
    UNSUPPORTED_TYPE = "unsupported_type"
