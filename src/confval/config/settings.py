"""CLI settings: command-line flags merged with ``CONFVAL_*`` env vars.

Priority chain (highest to lowest):
  1. Flags given on the command line
  2. Env vars: ``CONFVAL_VERBOSE=1``, ``CONFVAL_JSON_OUTPUT=true``, ...
  3. Code defaults
"""

from __future__ import annotations

from typing import Any

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


class ConfvalSettings(BaseSettings):
    """Frozen settings object stored on the click context.

    Attributes:
        json_output: Emit results as JSON.
        quiet: Minimal output.
        verbose: Debug logging and failure detail.
        log_json: JSON log lines on stderr.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CONFVAL_",
    }

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Flags, then environment. No dotenv or secrets directory."""
        return (init_settings, env_settings)

    @classmethod
    def from_cli(cls, **cli_flags: Any) -> ConfvalSettings:
        """Construct settings from a CLI invocation.

        Flags left at their off value are not passed on, so an env var can
        still switch them on.
        """
        return cls(**{name: value for name, value in cli_flags.items() if value})
