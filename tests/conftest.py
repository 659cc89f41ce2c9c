"""Shared pytest fixtures for clipsan tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from clipsan.services.burst import PasteBurstDetector
from clipsan.services.context import PasteContext
from clipsan.services.paste_store import PasteStore
from clipsan.services.pipeline import RulePipeline


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test.

    configure_logging() replaces the root handlers, which would otherwise leak
    a handler bound to a closed CliRunner stream into later tests.
    """
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    clipsan_logger = logging.getLogger("clipsan")
    clipsan_level = clipsan_logger.level
    yield
    for handler in root.handlers:
        if handler not in original_handlers:
            handler.close()
    root.handlers = original_handlers
    root.setLevel(original_level)
    clipsan_logger.setLevel(clipsan_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def pipeline() -> RulePipeline:
    """Pipeline seeded with the built-in default rule."""
    return RulePipeline()


@pytest.fixture
def store() -> PasteStore:
    return PasteStore()


@pytest.fixture
def detector() -> PasteBurstDetector:
    """Burst detector with explicit timings: 10ms start gap, 20ms idle timeout."""
    return PasteBurstDetector(
        char_interval_ms=10,
        active_idle_timeout_ms=20,
        enter_suppress_window_ms=120,
    )


@pytest.fixture
def paste_context() -> Generator[PasteContext]:
    """Plugin-free context with default rules and threshold."""
    ctx = PasteContext()
    try:
        yield ctx
    finally:
        ctx.close()


@pytest.fixture
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty temp directory with no config env overrides.

    Use via ``@pytest.mark.usefixtures("_isolated_config")`` so a
    ``clipsan.toml`` in a parent directory never leaks into a test.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CLIPSAN_CONFIG", str(tmp_path / "absent.toml"))
