"""Built-in plugin recording each dispatched paste as a structured log event.

Only the unit kind and size are logged; pasted text never is.
"""

from __future__ import annotations

import pluggy
import structlog

hookimpl = pluggy.HookimplMarker("clipsan")


class PasteLogPlugin:
    """Emits a ``paste dispatched`` debug event for every inbound paste."""

    def __init__(self) -> None:
        self._log = structlog.get_logger("clipsan.plugins.paste_log")
        self.counts: dict[str, int] = {}

    @hookimpl
    def post_paste(self, kind: str, char_count: int) -> None:
        self.counts[kind] = self.counts.get(kind, 0) + 1
        self._log.debug("paste dispatched", kind=kind, char_count=char_count)
