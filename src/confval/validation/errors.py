"""Failure records, the aggregated ValidationErrors, and misuse exceptions.

Two tiers of error:

- Validation failures (bad data) are collected as :class:`FieldFailure`
  entries and returned together in one :class:`ValidationErrors`.
- Programming errors (bad calls, bad declarations) are raised immediately
  as :class:`ConfvalError` subclasses and are never aggregated.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any, overload

from pydantic import BaseModel

from confval.domain.kinds import FailureKind


class ConfvalError(Exception):
    """Base class for programming errors raised by confval."""


class ValidatorMisuseError(ConfvalError, TypeError):
    """Raised when validate() is called on a non-record, or a mutating rule
    targets a field that cannot be written to."""


class RuleConfigError(ConfvalError, ValueError):
    """Raised for malformed rule configuration (bad bounds, unknown flags)."""


class RuleFailure(Exception):
    """Raised by a rule body to report a validation failure on one field.

    The walker catches it and records a :class:`FieldFailure`; it never
    escapes :func:`confval.validate`.
    """

    def __init__(self, kind: FailureKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


class FieldFailure(BaseModel):
    """One failed rule on one field."""

    model_config = {"frozen": True}

    path: str
    message: str
    kind: FailureKind

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class ValidationErrors(Exception, Sequence[FieldFailure]):
    """Every failure found in one validation walk, in visit order.

    Only ever constructed non-empty: success is represented by ``None``.
    Usable as an exception (``raise errors``) and as a sequence.
    """

    def __init__(self, failures: Sequence[FieldFailure]) -> None:
        self._failures: tuple[FieldFailure, ...] = tuple(failures)
        super().__init__(str(self))

    def __str__(self) -> str:
        return "\n".join(str(f) for f in self._failures)

    def __repr__(self) -> str:
        return f"ValidationErrors({list(self._failures)!r})"

    @overload
    def __getitem__(self, index: int) -> FieldFailure: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[FieldFailure]: ...

    def __getitem__(self, index: int | slice) -> FieldFailure | Sequence[FieldFailure]:
        return self._failures[index]

    def __len__(self) -> int:
        return len(self._failures)

    def __iter__(self) -> Iterator[FieldFailure]:
        return iter(self._failures)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, FailureKind):
            return self.is_(item)
        return item in self._failures

    def is_(self, kind: FailureKind) -> bool:
        """Return True if any failure is exactly of *kind*."""
        return any(f.kind is kind for f in self._failures)

    def paths(self) -> list[str]:
        """Failing field paths in visit order (duplicates preserved)."""
        return [f.path for f in self._failures]

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": len(self._failures),
            "failures": [f.model_dump(mode="json") for f in self._failures],
        }
