"""Tests for PasteDispatcher — image, sanitize, placeholder routing."""

from __future__ import annotations

from pathlib import Path

import pluggy
import pytest

from clipsan.domain.rules import LIVE_PREFIX_GLYPH, fn_rule
from clipsan.domain.types import BurstOutputKind, ImageSource, PasteAction
from clipsan.domain.units import ImageUnit, PlaceholderUnit, TextUnit
from clipsan.plugins.manager import PluginManager
from clipsan.services.burst import BurstOutput
from clipsan.services.dispatcher import DEFAULT_LARGE_PASTE_THRESHOLD, PasteDispatcher
from clipsan.services.paste_store import PasteStore
from clipsan.services.pipeline import RulePipeline

G = LIVE_PREFIX_GLYPH
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32

hookimpl = pluggy.HookimplMarker("clipsan")


class RecordingPlugin:
    def __init__(self) -> None:
        self.calls: list[tuple[str, int]] = []

    @hookimpl
    def post_paste(self, kind: str, char_count: int) -> None:
        self.calls.append((kind, char_count))


class ExplodingPlugin:
    @hookimpl
    def post_paste(self, kind: str, char_count: int) -> None:
        raise RuntimeError("boom")


@pytest.fixture
def dispatcher(pipeline: RulePipeline, store: PasteStore) -> PasteDispatcher:
    return PasteDispatcher(pipeline, store)


class TestText:
    def test_sanitized_paste_strips_glyph(self, dispatcher: PasteDispatcher) -> None:
        unit = dispatcher.handle_inbound_paste(f"{G}keep this")
        assert unit == TextUnit(text="keep this")

    def test_raw_paste_is_untouched(self, dispatcher: PasteDispatcher) -> None:
        unit = dispatcher.handle_inbound_paste(f"{G}keep this", action=PasteAction.RAW)
        assert unit == TextUnit(text=f"{G}keep this")

    def test_bytes_are_decoded(self, dispatcher: PasteDispatcher) -> None:
        unit = dispatcher.handle_inbound_paste(f"{G} café".encode())
        assert unit == TextUnit(text="café")

    def test_invalid_utf8_is_replaced(self, dispatcher: PasteDispatcher) -> None:
        unit = dispatcher.handle_inbound_paste(b"ok \xff")
        assert isinstance(unit, TextUnit)
        assert unit.text == "ok \ufffd"

    def test_empty_paste(self, dispatcher: PasteDispatcher) -> None:
        assert dispatcher.handle_inbound_paste("") == TextUnit(text="")


class TestThreshold:
    def test_default_threshold(self, dispatcher: PasteDispatcher) -> None:
        assert dispatcher.large_paste_threshold == DEFAULT_LARGE_PASTE_THRESHOLD == 1000

    def test_exactly_threshold_is_text(self, dispatcher: PasteDispatcher) -> None:
        unit = dispatcher.handle_inbound_paste("a" * 1000)
        assert isinstance(unit, TextUnit)

    def test_over_threshold_becomes_placeholder(
        self, dispatcher: PasteDispatcher, store: PasteStore
    ) -> None:
        text = "a" * 1001
        unit = dispatcher.handle_inbound_paste(text)
        assert isinstance(unit, PlaceholderUnit)
        assert unit.char_count == 1001
        assert store.resolve(unit.id) == text

    def test_threshold_measured_after_sanitizing(
        self, dispatcher: PasteDispatcher, store: PasteStore
    ) -> None:
        text = f"{G} " + "b" * 999
        unit = dispatcher.handle_inbound_paste(text)
        assert unit == TextUnit(text="b" * 999)
        assert len(store) == 0

    def test_placeholder_holds_sanitized_text(
        self, dispatcher: PasteDispatcher, store: PasteStore
    ) -> None:
        body = "\n".join(f"{G} line {i:04d}" for i in range(200))
        unit = dispatcher.handle_inbound_paste(body)
        assert isinstance(unit, PlaceholderUnit)
        assert G not in store.resolve(unit.id)

    def test_custom_threshold(self, pipeline: RulePipeline, store: PasteStore) -> None:
        d = PasteDispatcher(pipeline, store, large_paste_threshold=5)
        assert isinstance(d.handle_inbound_paste("12345"), TextUnit)
        assert isinstance(d.handle_inbound_paste("123456"), PlaceholderUnit)


class TestImages:
    def test_image_bytes(self, dispatcher: PasteDispatcher, store: PasteStore) -> None:
        unit = dispatcher.handle_inbound_paste(PNG_BYTES)
        assert isinstance(unit, ImageUnit)
        assert unit.descriptor.source is ImageSource.DATA
        assert unit.descriptor.format == "png"
        assert unit.descriptor.byte_length == len(PNG_BYTES)
        assert len(store) == 0

    def test_image_path(self, dispatcher: PasteDispatcher, tmp_path: Path) -> None:
        image = tmp_path / "shot.png"
        image.write_bytes(PNG_BYTES)
        unit = dispatcher.handle_inbound_paste(str(image))
        assert isinstance(unit, ImageUnit)
        assert unit.descriptor.source is ImageSource.PATH
        assert unit.descriptor.path == image

    def test_image_path_as_bytes(self, dispatcher: PasteDispatcher, tmp_path: Path) -> None:
        image = tmp_path / "shot.jpg"
        image.write_bytes(b"\xff\xd8\xff\xe0")
        unit = dispatcher.handle_inbound_paste(str(image).encode())
        assert isinstance(unit, ImageUnit)
        assert unit.descriptor.format == "jpeg"

    def test_image_on_raw_action(self, dispatcher: PasteDispatcher) -> None:
        unit = dispatcher.handle_inbound_paste(PNG_BYTES, action=PasteAction.RAW)
        assert isinstance(unit, ImageUnit)

    def test_missing_image_path_is_text(self, dispatcher: PasteDispatcher, tmp_path: Path) -> None:
        missing = str(tmp_path / "gone.png")
        assert dispatcher.handle_inbound_paste(missing) == TextUnit(text=missing)

    @pytest.mark.parametrize("action", list(PasteAction))
    def test_tilde_word_is_text(self, dispatcher: PasteDispatcher, action: PasteAction) -> None:
        unit = dispatcher.handle_inbound_paste("~approximately", action=action)
        assert unit == TextUnit(text="~approximately")

    def test_tilde_image_name_bytes_on_raw(self, dispatcher: PasteDispatcher) -> None:
        unit = dispatcher.handle_inbound_paste(b"~nobodyxyz.png", action=PasteAction.RAW)
        assert unit == TextUnit(text="~nobodyxyz.png")

    def test_pipeline_not_run_for_images(self, store: PasteStore) -> None:
        calls: list[str] = []

        def spy(text: str) -> str:
            calls.append(text)
            return text

        d = PasteDispatcher(RulePipeline([fn_rule("spy", spy)]), store)
        d.handle_inbound_paste(PNG_BYTES)
        assert calls == []


class TestBurstOutput:
    def test_typed_output_bypasses_pipeline(self, dispatcher: PasteDispatcher) -> None:
        output = BurstOutput(BurstOutputKind.TYPED, G)
        assert dispatcher.handle_burst_output(output) == TextUnit(text=G)

    def test_paste_output_is_sanitized(self, dispatcher: PasteDispatcher) -> None:
        output = BurstOutput(BurstOutputKind.PASTE, f"{G} pasted\n{G} lines")
        assert dispatcher.handle_burst_output(output) == TextUnit(text="pasted\nlines")


class TestOutbound:
    def test_copy_sanitizes(self, dispatcher: PasteDispatcher) -> None:
        assert dispatcher.handle_outbound_copy(f"{G} one\n{G} two") == "one\ntwo"

    def test_copy_raw(self, dispatcher: PasteDispatcher) -> None:
        assert dispatcher.handle_outbound_copy(f"{G} one", raw=True) == f"{G} one"


class TestNotifications:
    def test_post_paste_fired_per_kind(self, pipeline: RulePipeline, store: PasteStore) -> None:
        pm = PluginManager()
        recorder = RecordingPlugin()
        pm.register_plugin(recorder, name="recorder")
        d = PasteDispatcher(pipeline, store, plugin_manager=pm)

        d.handle_inbound_paste("short")
        d.handle_inbound_paste("x" * 1500)
        d.handle_inbound_paste(PNG_BYTES)

        assert recorder.calls == [("text", 5), ("placeholder", 1500), ("image", 0)]

    def test_plugin_failure_is_a_warning(
        self,
        pipeline: RulePipeline,
        store: PasteStore,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        pm = PluginManager()
        pm.register_plugin(ExplodingPlugin(), name="exploding")
        d = PasteDispatcher(pipeline, store, plugin_manager=pm)

        with caplog.at_level("WARNING", logger="clipsan.services.dispatcher"):
            unit = d.handle_inbound_paste("still works")

        assert unit == TextUnit(text="still works")
        assert "post_paste hook failed" in caplog.text
