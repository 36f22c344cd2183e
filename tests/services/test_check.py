"""Tests for CheckService and its target/environment helpers."""

from __future__ import annotations

import pytest

from confval.services.check import (
    CheckService,
    TargetError,
    build_lookup,
    load_target,
    parse_env_pairs,
)
from tests.fixtures.records import AppConfig, DatabaseSettings

RECORDS = "tests.fixtures.records"


class TestParseEnvPairs:
    def test_pairs(self) -> None:
        assert parse_env_pairs(["A=1", "B=x=y", "C="]) == {"A": "1", "B": "x=y", "C": ""}

    @pytest.mark.parametrize("pair", ["A", "=1"])
    def test_malformed(self, pair: str) -> None:
        with pytest.raises(ValueError, match="KEY=VALUE"):
            parse_env_pairs([pair])


class TestBuildLookup:
    def test_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CONFVAL_TEST_KEY", "environ")
        lookup = build_lookup({"CONFVAL_TEST_KEY": "override"})
        assert lookup("CONFVAL_TEST_KEY") == "override"

    def test_falls_back_to_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CONFVAL_TEST_KEY", "environ")
        assert build_lookup({})("CONFVAL_TEST_KEY") == "environ"

    def test_environ_excluded(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CONFVAL_TEST_KEY", "environ")
        assert build_lookup({}, include_environ=False)("CONFVAL_TEST_KEY") is None


class TestLoadTarget:
    def test_dataclass(self) -> None:
        assert load_target(f"{RECORDS}:AppConfig") is AppConfig

    def test_pydantic_model(self) -> None:
        assert load_target(f"{RECORDS}:DatabaseSettings") is DatabaseSettings

    @pytest.mark.parametrize(
        "target,match",
        [
            (RECORDS, "module:ClassName"),
            (f"{RECORDS}:", "module:ClassName"),
            ("confval_no_such_module:Config", "cannot import"),
            (f"{RECORDS}:Missing", "no attribute"),
            (f"{RECORDS}:NotARecord", "not a dataclass"),
        ],
    )
    def test_bad_targets(self, target: str, match: str) -> None:
        with pytest.raises(TargetError, match=match):
            load_target(target)


class TestCheck:
    def test_valid_record(self) -> None:
        result = CheckService().check(f"{RECORDS}:AppConfig", include_environ=False)
        assert result.ok, result.error
        values = result.data["values"]
        assert values["name"] == "demo"
        assert values["workers"] == 4
        assert values["server"] == {"host": "localhost", "port": 8080}

    def test_env_overrides(self) -> None:
        result = CheckService().check(
            f"{RECORDS}:AppConfig",
            env={"APP_PORT": "9000", "APP_DEBUG": "true"},
            include_environ=False,
        )
        assert result.ok, result.error
        assert result.data["values"]["server"]["port"] == 9000
        assert result.data["values"]["debug"] is True

    def test_validation_failure_lists_every_field(self) -> None:
        result = CheckService().check(f"{RECORDS}:StrictConfig", include_environ=False)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"
        assert result.error.detail["count"] == 2
        assert [f["path"] for f in result.error.detail["failures"]] == ["name", "token"]

    def test_env_failure_after_substitution(self) -> None:
        result = CheckService().check(
            f"{RECORDS}:AppConfig", env={"APP_PORT": "70000"}, include_environ=False
        )
        assert result.error is not None
        failure = result.error.detail["failures"][0]
        assert failure == {
            "path": "server.port",
            "message": "invalid value: 70000, maximum value is 65535",
            "kind": "above_maximum",
        }

    def test_pydantic_target(self) -> None:
        result = CheckService().check(
            f"{RECORDS}:DatabaseSettings", env={"DB_URL": "sqlite://"}, include_environ=False
        )
        assert result.ok, result.error
        assert result.data["values"] == {"url": "sqlite://", "pool_size": 5}

    @pytest.mark.parametrize(
        "name,code",
        [
            ("NotARecord", "BAD_TARGET"),
            ("NeedsArgs", "CONSTRUCT_FAILED"),
            ("FrozenConfig", "MISUSE"),
            ("BadBoundConfig", "RULE_CONFIG"),
        ],
    )
    def test_error_codes(self, name: str, code: str) -> None:
        result = CheckService().check(f"{RECORDS}:{name}", include_environ=False)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == code


class TestRules:
    def test_lists_registry_order(self) -> None:
        result = CheckService().rules()
        assert result.ok
        assert result.data["count"] == 6
        assert [item["name"] for item in result.data["items"]] == [
            "env",
            "default",
            "flags",
            "min",
            "max",
            "regex",
        ]
        assert result.data["items"][0] == {"order": 1, "name": "env", "mutates": True}
