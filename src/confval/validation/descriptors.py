"""Record descriptors: the per-type field list the walker iterates.

A record is a dataclass instance or a pydantic model instance. Its type is
described once (then cached) as a :class:`RecordDescriptor`: an ordered
tuple of :class:`FieldDescriptor` plus the record-level default
annotations attached with :func:`record`.

Annotations are declared with :func:`tags`::

    @record(flags="required")
    @dataclass
    class Server:
        host: str = field(default="", metadata=tags(env="HOST"))
        port: UInt = field(default=UInt(0), metadata=tags(default="8080", max="65535"))
"""

from __future__ import annotations

import dataclasses
import logging
import types
import typing
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import cache
from typing import Any, TypeVar

from pydantic import BaseModel

from confval.domain.kinds import FieldKind, UInt
from confval.validation.errors import ValidatorMisuseError

logger = logging.getLogger(__name__)

TAGS_KEY = "confval"
DEFAULTS_ATTR = "__confval_defaults__"

_SIZED_ORIGINS: tuple[type, ...] = (list, tuple, set, frozenset, dict, bytes, bytearray)

T = TypeVar("T", bound=type)


def tags(**annotations: Any) -> dict[str, dict[str, str]]:
    """Build field metadata carrying confval annotations.

    Works as dataclass ``field(metadata=...)`` and as pydantic
    ``Field(json_schema_extra=...)``. Values are stored as strings.
    """
    return {TAGS_KEY: {name: str(value) for name, value in annotations.items()}}


def record(**defaults: Any) -> Callable[[T], T]:
    """Class decorator attaching record-level default annotations.

    Each default applies to every field of the record that does not declare
    the same annotation name itself. Order relative to ``@dataclass`` does
    not matter.
    """
    frozen = types.MappingProxyType({name: str(value) for name, value in defaults.items()})

    def decorate(cls: T) -> T:
        setattr(cls, DEFAULTS_ATTR, frozen)
        describe.cache_clear()
        return cls

    return decorate


def is_record(obj: Any) -> bool:
    """True for dataclass instances and pydantic model instances."""
    if isinstance(obj, type):
        return False
    return isinstance(obj, BaseModel) or dataclasses.is_dataclass(obj)


def is_record_type(tp: Any) -> bool:
    if not isinstance(tp, type):
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


@dataclass(frozen=True)
class FieldDescriptor:
    """Static description of one record field."""

    name: str
    kind: FieldKind
    optional: bool
    settable: bool
    annotations: Mapping[str, str]

    def get(self, obj: Any) -> Any:
        try:
            return getattr(obj, self.name)
        except AttributeError:
            raise ValidatorMisuseError(
                f"field {type(obj).__name__}.{self.name} is not set on the instance"
            ) from None

    def set(self, obj: Any, value: Any) -> None:
        if not self.settable:
            raise ValidatorMisuseError(
                f"cannot assign field {type(obj).__name__}.{self.name}: record is frozen"
            )
        setattr(obj, self.name, value)


@dataclass(frozen=True)
class RecordDescriptor:
    """Ordered fields of a record type plus its record-level defaults."""

    record_type: type
    fields: tuple[FieldDescriptor, ...]
    defaults: Mapping[str, str]


@dataclass
class BoundField:
    """A field descriptor bound to one record instance, as rules see it."""

    descriptor: FieldDescriptor
    owner: Any
    path: str

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def kind(self) -> FieldKind:
        return self.descriptor.kind

    @property
    def optional(self) -> bool:
        return self.descriptor.optional

    @property
    def settable(self) -> bool:
        return self.descriptor.settable

    @property
    def value(self) -> Any:
        return self.descriptor.get(self.owner)

    def assign(self, value: Any) -> None:
        self.descriptor.set(self.owner, value)


# --- Type classification ---


def classify(tp: Any) -> tuple[FieldKind, bool]:
    """Return ``(kind, optional)`` for a declared field type.

    ``X | None`` and ``Optional[X]`` set *optional* and classify ``X``.
    ``Annotated[X, ...]`` classifies ``X``. Unions of several non-None
    types classify as OTHER.
    """
    optional = False
    origin = typing.get_origin(tp)
    if origin is typing.Annotated:
        tp = typing.get_args(tp)[0]
        origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        members = [a for a in typing.get_args(tp) if a is not type(None)]
        optional = len(members) < len(typing.get_args(tp))
        if len(members) != 1:
            return FieldKind.OTHER, optional
        tp = members[0]
        origin = typing.get_origin(tp)
    return _classify_plain(tp, origin), optional


def _classify_plain(tp: Any, origin: Any) -> FieldKind:
    if tp is UInt:
        return FieldKind.UINT
    if origin is not None:
        if isinstance(origin, type) and issubclass(origin, _SIZED_ORIGINS):
            return FieldKind.SIZED
        return FieldKind.OTHER
    if not isinstance(tp, type):
        return FieldKind.OTHER
    if issubclass(tp, bool):
        return FieldKind.BOOL
    if issubclass(tp, int):
        return FieldKind.INT
    if issubclass(tp, float):
        return FieldKind.FLOAT
    if issubclass(tp, str):
        return FieldKind.STR
    if issubclass(tp, _SIZED_ORIGINS):
        return FieldKind.SIZED
    if is_record_type(tp):
        return FieldKind.RECORD
    return FieldKind.OTHER


# --- Descriptor construction ---


@cache
def describe(record_type: type) -> RecordDescriptor:
    """Build (and cache) the descriptor for a dataclass or pydantic model type."""
    if issubclass(record_type, BaseModel):
        fields = _describe_model(record_type)
    elif dataclasses.is_dataclass(record_type):
        fields = _describe_dataclass(record_type)
    else:
        raise ValidatorMisuseError(f"cannot validate type {record_type.__name__}")
    defaults = getattr(record_type, DEFAULTS_ATTR, None) or types.MappingProxyType({})
    logger.debug(
        "Described record %s: %d fields, defaults=%s",
        record_type.__qualname__,
        len(fields),
        sorted(defaults),
    )
    return RecordDescriptor(record_type=record_type, fields=fields, defaults=defaults)


def _describe_dataclass(cls: type) -> tuple[FieldDescriptor, ...]:
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except NameError:
        # Forward references to locally defined types; nested records are
        # still recursed into by value.
        logger.debug("Could not resolve type hints for %s", cls.__qualname__, exc_info=True)
        hints = {}
    settable = not cls.__dataclass_params__.frozen  # type: ignore[attr-defined]
    result = []
    for f in dataclasses.fields(cls):
        kind, optional = classify(hints.get(f.name, f.type))
        result.append(
            FieldDescriptor(
                name=f.name,
                kind=kind,
                optional=optional,
                settable=settable,
                annotations=types.MappingProxyType(dict(f.metadata.get(TAGS_KEY, {}))),
            )
        )
    return tuple(result)


def _describe_model(cls: type[BaseModel]) -> tuple[FieldDescriptor, ...]:
    model_frozen = bool(cls.model_config.get("frozen", False))
    result = []
    for name, info in cls.model_fields.items():
        kind, optional = classify(info.annotation)
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        raw = extra.get(TAGS_KEY, {})
        result.append(
            FieldDescriptor(
                name=name,
                kind=kind,
                optional=optional,
                settable=not (model_frozen or info.frozen),
                annotations=types.MappingProxyType(dict(raw) if isinstance(raw, dict) else {}),
            )
        )
    return tuple(result)


def descriptor_for(obj: Any) -> RecordDescriptor:
    """Descriptor for a record instance.

    Raises:
        ValidatorMisuseError: If *obj* is not a record instance.
    """
    if not is_record(obj):
        raise ValidatorMisuseError(f"validator: cannot validate type {type(obj).__name__}")
    return describe(type(obj))
