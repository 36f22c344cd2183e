"""Shared pytest fixtures for confval tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator

import pytest
from click.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def fake_env() -> Callable[..., Callable[[str], str | None]]:
    """Build an environment lookup from keyword pairs.

    Usage::

        errors = validate(cfg, lookup=fake_env(PORT="8080"))
    """

    def build(**values: str) -> Callable[[str], str | None]:
        return values.get

    return build


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() calls made by the CLI or logging tests."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    library = logging.getLogger("confval")
    library_level = library.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    library.setLevel(library_level)
