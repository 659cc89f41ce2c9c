"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, clipsan.toml only contains overrides.
An empty file (or no file at all) yields the default pipeline and timings.
"""

from __future__ import annotations

import sys

from pydantic import BaseModel, Field, field_validator

from clipsan.domain.rules import BUILTIN_RULE_NAMES, DEFAULT_RULE_NAMES, LIVE_PREFIX_GLYPH

# Windows console hosts deliver key events in coarser batches.
_ON_WINDOWS = sys.platform == "win32"


class SanitizeConfig(BaseModel):
    """[sanitize] section."""

    model_config = {"frozen": True}

    rules: list[str] = Field(default_factory=lambda: list(DEFAULT_RULE_NAMES))
    marker_glyph: str = Field(default=LIVE_PREFIX_GLYPH, min_length=1)

    @field_validator("rules")
    @classmethod
    def _known_rules(cls, value: list[str]) -> list[str]:
        unknown = [name for name in value if name not in BUILTIN_RULE_NAMES]
        if unknown:
            known = ", ".join(sorted(BUILTIN_RULE_NAMES))
            msg = f"Unknown sanitize rule(s): {', '.join(unknown)} (known: {known})"
            raise ValueError(msg)
        return value


class PasteConfig(BaseModel):
    """[paste] section."""

    model_config = {"frozen": True}

    large_paste_threshold: int = Field(default=1000, ge=1)


class BurstConfig(BaseModel):
    """[burst] section. All values in milliseconds."""

    model_config = {"frozen": True}

    char_interval_ms: float = Field(default=30 if _ON_WINDOWS else 8, gt=0)
    active_idle_timeout_ms: float = Field(default=60 if _ON_WINDOWS else 8, gt=0)
    enter_suppress_window_ms: float = Field(default=120, ge=0)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str | None = None


class ClipsanConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    sanitize: SanitizeConfig = Field(default_factory=SanitizeConfig)
    paste: PasteConfig = Field(default_factory=PasteConfig)
    burst: BurstConfig = Field(default_factory=BurstConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
