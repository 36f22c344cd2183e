"""Record walker: recursive traversal, annotation resolution, aggregation.

INVARIANT: A walk never stops at the first failure. Every field of every
reachable record is visited and every failure is reported.

Visit order is depth-first: for each field in declaration order, a nested
record value is walked first, then the field's own rules run in registry
order. Failure paths are dotted from the root (``server.port``).

Preconditions: the record graph is acyclic, and no other thread validates
the same record concurrently (rules assign fields in place).
"""

from __future__ import annotations

import logging
import os
from typing import Any

from confval.validation.descriptors import BoundField, RecordDescriptor, descriptor_for, is_record
from confval.validation.errors import FieldFailure, RuleFailure, ValidationErrors
from confval.validation.registry import RuleRegistry, default_registry
from confval.validation.rules import Lookup, RuleContext

logger = logging.getLogger(__name__)


class RecordWalker:
    """Walks one record graph against a rule registry.

    A walker owns the failure list of a single :meth:`validate` call, so it
    must not be reused across calls or shared between threads.
    """

    def __init__(self, registry: RuleRegistry, lookup: Lookup) -> None:
        self._registry = registry
        self._ctx = RuleContext(lookup=lookup)
        self._failures: list[FieldFailure] = []

    def validate(self, obj: Any) -> ValidationErrors | None:
        """Walk *obj* and return the aggregated failures, or None on success.

        Raises:
            ValidatorMisuseError: If *obj* is not a record, or a mutating rule
                targets a frozen record.
            RuleConfigError: If an annotation argument is malformed rule
                configuration.
        """
        self._walk(obj, "")
        if not self._failures:
            return None
        logger.debug("Validation found %d failure(s)", len(self._failures))
        return ValidationErrors(self._failures)

    def _walk(self, obj: Any, prefix: str) -> None:
        descriptor = descriptor_for(obj)
        logger.debug("Walking %s at %r", descriptor.record_type.__qualname__, prefix or "<root>")
        defaults = self._record_defaults(descriptor)

        for field in descriptor.fields:
            bound = BoundField(descriptor=field, owner=obj, path=f"{prefix}{field.name}")

            nested = bound.value
            if is_record(nested):
                self._walk(nested, f"{bound.path}.")

            for name, rule in self._registry:
                argument = field.annotations.get(name, defaults.get(name))
                if argument is None:
                    continue
                try:
                    rule.apply(argument, bound, self._ctx)
                except RuleFailure as exc:
                    logger.debug("%s failed `%s`: %s", bound.path, name, exc.message)
                    self._failures.append(
                        FieldFailure(path=bound.path, message=exc.message, kind=exc.kind)
                    )

    def _record_defaults(self, descriptor: RecordDescriptor) -> dict[str, str]:
        """Record-level default arguments for the registered rule names only."""
        return {
            name: descriptor.defaults[name]
            for name in self._registry.names()
            if name in descriptor.defaults
        }


def validate(
    obj: Any,
    *,
    lookup: Lookup | None = None,
    registry: RuleRegistry | None = None,
) -> ValidationErrors | None:
    """Validate and fill a record in place.

    Args:
        obj: A dataclass or pydantic model instance.
        lookup: Environment collaborator for the ``env`` rule. Defaults to
            ``os.environ.get``.
        registry: Rule table. Defaults to the built-in rules.

    Returns:
        None when every field conforms, otherwise a :class:`ValidationErrors`
        listing every failure in visit order.
    """
    walker = RecordWalker(
        registry if registry is not None else default_registry(),
        lookup if lookup is not None else os.environ.get,
    )
    return walker.validate(obj)
