"""PasteContext — explicit owner of all paste-related state.

One context per composer widget. It owns the rule pipeline, the paste
store, the burst detector and the dispatcher, and is the surface the UI
layer talks to. Construction seeds the configured rules (plus any plugin
rules); :meth:`PasteContext.close` flushes the burst detector and drops
stored pastes.

Usage::

    settings = ClipsanSettings.from_cli()
    with PasteContext.from_settings(settings) as ctx:
        unit = ctx.handle_inbound_paste(clipboard_text)
        ...
        final = ctx.expand_placeholders(document)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from clipsan.domain.rules import Rule, resolve_rules
from clipsan.domain.types import PasteAction
from clipsan.services.burst import BurstOutput, PasteBurstDetector
from clipsan.services.dispatcher import DEFAULT_LARGE_PASTE_THRESHOLD, PasteDispatcher
from clipsan.services.paste_store import PasteStore
from clipsan.services.pipeline import RulePipeline

if TYPE_CHECKING:
    from collections.abc import Iterable

    from clipsan.config.settings import ClipsanSettings
    from clipsan.domain.units import InsertableUnit
    from clipsan.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class PasteContext:
    """Injectable owner of the pipeline, paste store, burst detector and dispatcher.

    Parameters:
        pipeline: Defaults to a pipeline seeded with the built-in default rule.
        store: Defaults to an empty :class:`PasteStore`.
        burst: Defaults to a detector with built-in timings.
        large_paste_threshold: Placeholder trigger, in characters.
        plugin_manager: Optional; receives ``post_paste`` notifications.
    """

    def __init__(
        self,
        *,
        pipeline: RulePipeline | None = None,
        store: PasteStore | None = None,
        burst: PasteBurstDetector | None = None,
        large_paste_threshold: int = DEFAULT_LARGE_PASTE_THRESHOLD,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self.pipeline = pipeline if pipeline is not None else RulePipeline()
        self.store = store if store is not None else PasteStore()
        self.burst = burst if burst is not None else PasteBurstDetector()
        self.plugin_manager = plugin_manager
        self.dispatcher = PasteDispatcher(
            self.pipeline,
            self.store,
            large_paste_threshold=large_paste_threshold,
            plugin_manager=plugin_manager,
        )
        self._closed = False

    @classmethod
    def from_settings(
        cls,
        settings: ClipsanSettings,
        *,
        plugin_manager: PluginManager | None = None,
    ) -> PasteContext:
        """Build a context from settings, loading plugins when enabled.

        Rule order: configured built-ins first, then plugin rules in plugin
        registration order.
        """
        rules: list[Rule] = resolve_rules(
            settings.sanitize.rules, marker=settings.sanitize.marker_glyph
        )

        pm = plugin_manager
        if settings.plugins.enabled:
            if pm is None:
                from clipsan.plugins.builtins.paste_log import PasteLogPlugin
                from clipsan.plugins.manager import PluginManager

                pm = PluginManager()
                pm.register_plugin(PasteLogPlugin(), name="paste_log")
            if not pm.is_loaded:
                local_dir = settings.plugins.local_dir
                pm.discover_and_load(local_dir=Path(local_dir) if local_dir else None)
            rules.extend(pm.collect_rules())
        else:
            pm = None

        burst_cfg = settings.burst
        return cls(
            pipeline=RulePipeline(rules, marker=settings.sanitize.marker_glyph),
            burst=PasteBurstDetector(
                char_interval_ms=burst_cfg.char_interval_ms,
                active_idle_timeout_ms=burst_cfg.active_idle_timeout_ms,
                enter_suppress_window_ms=burst_cfg.enter_suppress_window_ms,
            ),
            large_paste_threshold=settings.paste.large_paste_threshold,
            plugin_manager=pm,
        )

    # ------------------------------------------------------------------
    # Pipeline surface
    # ------------------------------------------------------------------

    def apply_pipeline(self, text: str) -> str:
        """Run *text* through the active rules (inbound or outbound)."""
        return self.pipeline.apply(text)

    def register_rule(self, rule: Rule) -> None:
        """Append *rule* to the pipeline."""
        self.pipeline.register(rule)

    def replace_all(self, rules: Iterable[Rule]) -> None:
        """Swap the whole pipeline atomically."""
        self.pipeline.replace_all(rules)

    # ------------------------------------------------------------------
    # Paste surface
    # ------------------------------------------------------------------

    def handle_inbound_paste(
        self,
        raw: str | bytes,
        *,
        action: PasteAction = PasteAction.SANITIZED,
    ) -> InsertableUnit:
        """Dispatch a completed paste (bracketed or burst-reconstructed)."""
        return self.dispatcher.handle_inbound_paste(raw, action=action)

    def handle_burst_outputs(self, outputs: Iterable[BurstOutput]) -> list[InsertableUnit]:
        """Dispatch everything the burst detector released, in order."""
        return [self.dispatcher.handle_burst_output(output) for output in outputs]

    def copy_to_clipboard(self, text: str, *, raw: bool = False) -> str:
        """Return the text to place on the system clipboard."""
        return self.dispatcher.handle_outbound_copy(text, raw=raw)

    def resolve_placeholder(self, placeholder_id: str) -> str:
        """Return the full text behind a placeholder.

        Raises:
            PlaceholderNotFoundError: If the id is not live.
        """
        return self.store.resolve(placeholder_id)

    def expand_placeholders(self, document: str) -> str:
        """Substitute every live placeholder in *document* with its full text."""
        return self.store.expand(document)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> list[BurstOutput]:
        """Tear down: flush the burst detector and drop stored pastes.

        Returns whatever the burst detector was still holding so the caller
        can insert it before the widget goes away.
        """
        if self._closed:
            return []
        pending = self.burst.flush_pending()
        dropped = len(self.store)
        self.store.clear()
        self._closed = True
        logger.debug("Paste context closed (%d stored paste(s) dropped)", dropped)
        return pending

    def __enter__(self) -> PasteContext:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
