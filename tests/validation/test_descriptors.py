"""Tests for record descriptors, type classification, tags() and @record."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any, Optional

import pytest
from pydantic import BaseModel, ConfigDict, Field

from confval.domain.kinds import FieldKind, UInt
from confval.validation.descriptors import (
    TAGS_KEY,
    BoundField,
    classify,
    describe,
    descriptor_for,
    is_record,
    record,
    tags,
)
from confval.validation.errors import ValidatorMisuseError


@dataclass
class Inner:
    value: int = 0


@record(min="0", regex="x+")
@dataclass
class Outer:
    count: int = field(default=0, metadata=tags(min="10", description="ignored"))
    ratio: float = 0.0
    label: str | None = None
    inner: Inner = field(default_factory=Inner)


@dataclass(frozen=True)
class Frozen:
    port: int = 0


@dataclass
class Unset:
    token: str = field(init=False)


class Model(BaseModel):
    url: str = Field(default="", json_schema_extra=tags(env="URL"))
    locked: int = Field(default=1, frozen=True)
    plain: bool = False


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = ""


CLASSIFY_CASES: list[tuple[Any, FieldKind, bool]] = [
    (int, FieldKind.INT, False),
    (UInt, FieldKind.UINT, False),
    (float, FieldKind.FLOAT, False),
    (str, FieldKind.STR, False),
    (bool, FieldKind.BOOL, False),
    (int | None, FieldKind.INT, True),
    (Optional[str], FieldKind.STR, True),
    (Optional[UInt], FieldKind.UINT, True),
    (list[int], FieldKind.SIZED, False),
    (dict[str, int] | None, FieldKind.SIZED, True),
    (tuple, FieldKind.SIZED, False),
    (Inner, FieldKind.RECORD, False),
    (Model | None, FieldKind.RECORD, True),
    (Annotated[int, "meta"], FieldKind.INT, False),
    (str | int, FieldKind.OTHER, False),
    (Any, FieldKind.OTHER, False),
]


@pytest.mark.parametrize("tp,kind,optional", CLASSIFY_CASES)
def test_classify(tp: Any, kind: FieldKind, optional: bool) -> None:
    assert classify(tp) == (kind, optional)


class TestTags:
    def test_values_are_stringified(self) -> None:
        assert tags(min=1, flags="required", default=True) == {
            TAGS_KEY: {"min": "1", "flags": "required", "default": "True"}
        }


class TestDescribeDataclass:
    def test_fields_in_declaration_order(self) -> None:
        desc = describe(Outer)
        assert [f.name for f in desc.fields] == ["count", "ratio", "label", "inner"]
        assert [f.kind for f in desc.fields] == [
            FieldKind.INT,
            FieldKind.FLOAT,
            FieldKind.STR,
            FieldKind.RECORD,
        ]
        assert desc.fields[2].optional is True

    def test_explicit_annotations(self) -> None:
        count = describe(Outer).fields[0]
        assert dict(count.annotations) == {"min": "10", "description": "ignored"}
        assert dict(describe(Outer).fields[1].annotations) == {}

    def test_record_level_defaults(self) -> None:
        assert dict(describe(Outer).defaults) == {"min": "0", "regex": "x+"}
        assert dict(describe(Inner).defaults) == {}

    def test_cached_per_type(self) -> None:
        assert describe(Outer) is describe(Outer)

    def test_frozen_dataclass_is_not_settable(self) -> None:
        assert describe(Frozen).fields[0].settable is False
        assert describe(Outer).fields[0].settable is True


class TestDescribeModel:
    def test_json_schema_extra_annotations(self) -> None:
        url, locked, plain = describe(Model).fields
        assert dict(url.annotations) == {"env": "URL"}
        assert plain.kind is FieldKind.BOOL
        assert dict(plain.annotations) == {}

    def test_frozen_field_and_model(self) -> None:
        _, locked, plain = describe(Model).fields
        assert locked.settable is False
        assert plain.settable is True
        assert describe(FrozenModel).fields[0].settable is False


class TestDescriptorFor:
    @pytest.mark.parametrize("obj", [42, "text", None, Outer, [Outer()]])
    def test_rejects_non_records(self, obj: Any) -> None:
        with pytest.raises(ValidatorMisuseError, match="cannot validate type"):
            descriptor_for(obj)

    def test_accepts_instances(self) -> None:
        assert descriptor_for(Outer()).record_type is Outer
        assert descriptor_for(Model()).record_type is Model

    def test_is_record(self) -> None:
        assert is_record(Inner())
        assert is_record(Model())
        assert not is_record(Inner)
        assert not is_record({"value": 1})


class TestBoundField:
    def test_reads_and_assigns_owner(self) -> None:
        obj = Outer()
        bound = BoundField(descriptor=describe(Outer).fields[0], owner=obj, path="count")
        assert bound.value == 0
        bound.assign(12)
        assert obj.count == 12

    def test_assign_on_frozen_raises_misuse(self) -> None:
        obj = Frozen()
        bound = BoundField(descriptor=describe(Frozen).fields[0], owner=obj, path="port")
        with pytest.raises(ValidatorMisuseError, match="frozen"):
            bound.assign(1)

    def test_unset_attribute_raises_misuse(self) -> None:
        obj = Unset()
        bound = BoundField(descriptor=describe(Unset).fields[0], owner=obj, path="token")
        with pytest.raises(ValidatorMisuseError, match="Unset.token is not set"):
            _ = bound.value
