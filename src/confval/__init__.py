"""confval: annotation-driven validation and filling of configuration records."""

from __future__ import annotations

from confval.domain.kinds import FailureKind, UInt
from confval.validation.descriptors import record, tags
from confval.validation.errors import (
    ConfvalError,
    FieldFailure,
    RuleConfigError,
    ValidationErrors,
    ValidatorMisuseError,
)
from confval.validation.registry import RuleRegistry, default_registry
from confval.validation.rules import Rule
from confval.validation.walker import validate

__version__ = "0.1.0"

__all__ = [
    "ConfvalError",
    "FailureKind",
    "FieldFailure",
    "Rule",
    "RuleConfigError",
    "RuleRegistry",
    "UInt",
    "ValidationErrors",
    "ValidatorMisuseError",
    "__version__",
    "default_registry",
    "record",
    "tags",
    "validate",
]
