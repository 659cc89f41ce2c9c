"""Unified settings: CLI flags, env vars, and TOML config in one object.

Sources, highest priority first:

1. Init kwargs (CLI flags passed by Click, or keyword arguments from a host)
2. ``CLIPSAN_*`` environment variables; nested keys use ``__``, for example
   ``CLIPSAN_PASTE__LARGE_PASTE_THRESHOLD=4000``
3. ``clipsan.toml`` found by :func:`~clipsan.config.discovery.find_config`
4. Defaults baked into the section models
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from clipsan.config.discovery import find_config, read_toml
from clipsan.config.models import BurstConfig, PasteConfig, PluginsConfig, SanitizeConfig
from clipsan.domain.errors import ConfigFileError

# TOML file for the settings object currently being built by from_cli().
_active_toml: ContextVar[Path | None] = ContextVar("clipsan_active_toml", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by an already-located ``clipsan.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path is None or not toml_path.is_file():
            return
        try:
            self._data = read_toml(toml_path)
        except ConfigFileError as exc:
            raise click.ClickException(str(exc)) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class ClipsanSettings(BaseSettings):
    """Frozen settings for the CLI and for embedding hosts.

    The CLI keeps one on its ``AppContext``; hosts pass one to
    :meth:`~clipsan.services.context.PasteContext.from_settings`.

    Attributes:
        config_path: The TOML file actually read, or None.
        log_file: Send logs here instead of stderr.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CLIPSAN_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False
    log_file: Path | None = None

    # --- TOML sections ---
    sanitize: SanitizeConfig = Field(default_factory=SanitizeConfig)
    paste: PasteConfig = Field(default_factory=PasteConfig)
    burst: BurstConfig = Field(default_factory=BurstConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Drop dotenv and secrets; read TOML below env vars."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _active_toml.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start_dir: Path | None = None,
        **cli_flags: Any,
    ) -> ClipsanSettings:
        """Build settings for one invocation.

        An explicit *config_path* that does not exist means "no file" rather
        than falling back to discovery. Without one, ``clipsan.toml`` is
        looked up from *start_dir*.
        """
        if config_path:
            candidate = Path(config_path)
            toml_path = candidate if candidate.is_file() else None
        else:
            toml_path = find_config(start_dir)

        token = _active_toml.set(toml_path)
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _active_toml.reset(token)
