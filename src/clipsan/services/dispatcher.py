"""PasteDispatcher — turns a completed inbound paste into an insertable unit.

A paste reaches the dispatcher either bracketed by the terminal or
reconstructed by the burst detector. Steps, in order:

1. Image interpretation (both actions). An image stops text handling.
2. Sanitized action: run the pipeline. Raw action: keep the text as is.
3. Longer than the threshold: store it and return a placeholder.
4. Otherwise return the text.

Only step 3 mutates state (the paste store).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from clipsan.domain.types import BurstOutputKind, ImageSource, PasteAction, UnitKind
from clipsan.domain.units import (
    ImageDescriptor,
    ImageUnit,
    InsertableUnit,
    PlaceholderUnit,
    TextUnit,
)
from clipsan.infrastructure.images import detect_image

if TYPE_CHECKING:
    from clipsan.plugins.manager import PluginManager
    from clipsan.services.burst import BurstOutput
    from clipsan.services.paste_store import PasteStore
    from clipsan.services.pipeline import RulePipeline

logger = logging.getLogger(__name__)

DEFAULT_LARGE_PASTE_THRESHOLD = 1000


class PasteDispatcher:
    """Routes inbound pastes through image detection, the pipeline and the store.

    Parameters:
        pipeline: Rules applied on the sanitized action.
        store: Receives pastes longer than *large_paste_threshold*.
        large_paste_threshold: Character count above which a placeholder
            is produced. A paste of exactly this many characters is text.
        plugin_manager: Optional; notified via ``post_paste`` after dispatch.
    """

    def __init__(
        self,
        pipeline: RulePipeline,
        store: PasteStore,
        *,
        large_paste_threshold: int = DEFAULT_LARGE_PASTE_THRESHOLD,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._store = store
        self._threshold = large_paste_threshold
        self._pm = plugin_manager

    @property
    def large_paste_threshold(self) -> int:
        return self._threshold

    def handle_inbound_paste(
        self,
        raw: str | bytes,
        *,
        action: PasteAction = PasteAction.SANITIZED,
    ) -> InsertableUnit:
        """Resolve a completed paste into text, a placeholder, or an image."""
        match = detect_image(raw)
        if match is None and isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
            match = detect_image(raw)
        if match is not None:
            source = ImageSource.PATH if match.path is not None else ImageSource.DATA
            descriptor = ImageDescriptor(
                source=source,
                format=match.format,
                path=match.path,
                byte_length=match.byte_length,
            )
            unit: InsertableUnit = ImageUnit(descriptor=descriptor)
            self._notify(UnitKind.IMAGE, 0)
            return unit

        text = raw if isinstance(raw, str) else raw.decode("utf-8", errors="replace")
        if action is PasteAction.SANITIZED:
            text = self._pipeline.sanitize_inbound(text)

        char_count = len(text)
        if char_count > self._threshold:
            entry = self._store.add(text)
            unit = PlaceholderUnit(id=entry.id, char_count=char_count)
            self._notify(UnitKind.PLACEHOLDER, char_count)
            return unit

        unit = TextUnit(text=text)
        self._notify(UnitKind.TEXT, char_count)
        return unit

    def handle_burst_output(self, output: BurstOutput) -> InsertableUnit:
        """Route burst-detector output: pastes are dispatched, keystrokes pass through."""
        if output.kind is BurstOutputKind.PASTE:
            return self.handle_inbound_paste(output.text, action=PasteAction.SANITIZED)
        return TextUnit(text=output.text)

    def handle_outbound_copy(self, text: str, *, raw: bool = False) -> str:
        """Return the text to place on the system clipboard."""
        if raw:
            return text
        return self._pipeline.sanitize_outbound(text)

    def _notify(self, kind: UnitKind, char_count: int) -> None:
        """Fire ``post_paste``. INVARIANT: Plugin failures are warnings, never errors."""
        if self._pm is None:
            return
        try:
            self._pm.hook.post_paste(kind=str(kind), char_count=char_count)
        except Exception:
            logger.warning("post_paste hook failed", exc_info=True)
