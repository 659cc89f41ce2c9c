"""Config file discovery and loading.

``clipsan.toml`` is looked up from the working directory towards the
filesystem root, the way git finds ``.git/``. ``CLIPSAN_CONFIG`` pins one
file and disables the walk; ``--config`` on the CLI overrides both.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from clipsan.config.models import ClipsanConfig
from clipsan.domain.errors import ConfigFileError

CONFIG_FILENAME = "clipsan.toml"
CONFIG_ENV_VAR = "CLIPSAN_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ``clipsan.toml`` at or above *start* (default: cwd).

    When ``CLIPSAN_CONFIG`` is set, that file is returned if it exists and
    None otherwise; no walk-up happens.
    """
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned)
        return path if path.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML.

    Raises:
        ConfigFileError: If the file is not valid TOML.
    """
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileError(path, str(exc)) from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> ClipsanConfig:
    """Load and validate the TOML sections only (no env vars, no CLI flags).

    Falls back to :func:`find_config` from *cwd* when *path* is None and to
    an all-defaults config when nothing is found.
    """
    resolved = path if path is not None else find_config(cwd)
    if resolved is None:
        return ClipsanConfig()
    return ClipsanConfig.model_validate(read_toml(resolved))
