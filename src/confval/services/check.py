"""CheckService: validate a record class named on the command line.

The target is ``package.module:ClassName``. The class is imported,
instantiated with no arguments (every field needs a code default), and
validated against the process environment overlaid with explicit
``KEY=VALUE`` overrides.
"""

from __future__ import annotations

import dataclasses
import importlib
import logging
import os
from collections import ChainMap
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel

from confval.services.result import ServiceResult
from confval.validation.descriptors import is_record_type
from confval.validation.errors import ConfvalError, RuleConfigError
from confval.validation.registry import RuleRegistry, default_registry
from confval.validation.rules import Lookup
from confval.validation.walker import validate

logger = logging.getLogger(__name__)


class TargetError(ConfvalError):
    """The ``module:ClassName`` target could not be resolved to a record type."""


def parse_env_pairs(pairs: Iterable[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` strings. The value may itself contain ``=``.

    Raises:
        ValueError: If a pair has no ``=`` or an empty key.
    """
    result: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"expected KEY=VALUE, got {pair!r}")
        result[key] = value
    return result


def build_lookup(overrides: Mapping[str, str], *, include_environ: bool = True) -> Lookup:
    """Environment collaborator: *overrides* first, then ``os.environ``."""
    layers: list[Mapping[str, str]] = [dict(overrides)]
    if include_environ:
        layers.append(os.environ)
    return ChainMap(*layers).get


def load_target(target: str) -> type:
    """Import ``module:ClassName`` and return the record type.

    Raises:
        TargetError: On a malformed target, an import failure, a missing
            attribute, or an attribute that is not a record type.
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise TargetError(f"target must look like 'module:ClassName', got {target!r}")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise TargetError(f"cannot import {module_name!r}: {exc}") from exc
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise TargetError(f"{module_name!r} has no attribute {attr_path!r}") from None
    if not is_record_type(obj):
        raise TargetError(f"{target!r} is not a dataclass or pydantic model")
    return obj


def dump_record(obj: Any) -> dict[str, Any]:
    """JSON-ready field values of a validated record."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    return dataclasses.asdict(obj)


class CheckService:
    """Operations behind the ``check`` and ``rules`` commands."""

    def __init__(self, registry: RuleRegistry | None = None) -> None:
        self._registry = registry if registry is not None else default_registry()

    def check(
        self,
        target: str,
        *,
        env: Mapping[str, str] | None = None,
        include_environ: bool = True,
    ) -> ServiceResult:
        op = "check"
        try:
            record_type = load_target(target)
        except TargetError as exc:
            return ServiceResult.failure(op, "BAD_TARGET", str(exc), target=target)

        try:
            instance = record_type()
        except Exception as exc:  # noqa: BLE001
            logger.debug("Constructing %s failed", target, exc_info=True)
            return ServiceResult.failure(
                op, "CONSTRUCT_FAILED", f"cannot construct {target}: {exc}", target=target
            )

        lookup = build_lookup(env or {}, include_environ=include_environ)
        try:
            errors = validate(instance, lookup=lookup, registry=self._registry)
        except RuleConfigError as exc:
            return ServiceResult.failure(op, "RULE_CONFIG", str(exc), target=target)
        except ConfvalError as exc:
            return ServiceResult.failure(op, "MISUSE", str(exc), target=target)

        if errors is not None:
            return ServiceResult.failure(
                op,
                "VALIDATION_FAILED",
                f"{len(errors)} field(s) failed validation",
                target=target,
                **errors.to_dict(),
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"target": target, "values": dump_record(instance)},
        )

    def rules(self) -> ServiceResult:
        """List registered rules in evaluation order."""
        items = [
            {"order": index, "name": name, "mutates": rule.mutates}
            for index, (name, rule) in enumerate(self._registry, start=1)
        ]
        return ServiceResult(ok=True, op="rules", data={"count": len(items), "items": items})
