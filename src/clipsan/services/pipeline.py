"""RulePipeline — ordered, replaceable sequence of sanitization rules.

Rules execute left to right; the output of one feeds the next. The active
sequence is an immutable tuple swapped by a single reference assignment, so
an in-flight :meth:`RulePipeline.apply` runs entirely against the sequence
it started with. Mutation (startup, plugins, tests) is rare; reads are
frequent.

Both directions currently share one pipeline: :meth:`sanitize_outbound`
for text copied to the system clipboard, :meth:`sanitize_inbound` for
pasted text. They are separate entry points so they can diverge later.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field

from clipsan.domain.rules import LIVE_PREFIX_GLYPH, Rule, default_rules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SanitizeOutcome:
    """Result of a pipeline run.

    Attributes:
        text: Final text. Identical to the input object when ``changed`` is False.
        changed: Whether any rule transformed the text.
        applied_rules: Names of the rules that transformed the text, in order.
    """

    text: str
    changed: bool = False
    applied_rules: tuple[str, ...] = field(default_factory=tuple)


class RulePipeline:
    """Owns an ordered sequence of rules and applies them to clipboard text.

    Parameters:
        rules: Initial sequence. ``None`` seeds the built-in defaults.
        marker: Marker glyph for the default ``strip_prefix_glyph`` rule.
    """

    def __init__(
        self,
        rules: Iterable[Rule] | None = None,
        *,
        marker: str = LIVE_PREFIX_GLYPH,
    ) -> None:
        self._marker = marker
        self._lock = threading.Lock()
        self._rules: tuple[Rule, ...] = (
            tuple(default_rules(marker=marker)) if rules is None else tuple(rules)
        )

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def rules(self) -> tuple[Rule, ...]:
        """Snapshot of the active sequence."""
        return self._rules

    @property
    def names(self) -> list[str]:
        """Names of the active rules, in execution order."""
        return [r.name for r in self._rules]

    def __len__(self) -> int:
        return len(self._rules)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def register(self, rule: Rule) -> None:
        """Append *rule* to the end of the live sequence."""
        with self._lock:
            self._rules = (*self._rules, rule)
        logger.debug("Registered sanitize rule: %s", rule.name)

    def replace_all(self, rules: Iterable[Rule]) -> None:
        """Swap the entire sequence atomically."""
        new_rules = tuple(rules)
        with self._lock:
            self._rules = new_rules
        logger.debug("Replaced sanitize rules: %s", [r.name for r in new_rules])

    def reset_to_defaults(self) -> None:
        """Restore the built-in default sequence."""
        self.replace_all(default_rules(marker=self._marker))

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    def apply_with_outcome(self, text: str) -> SanitizeOutcome:
        """Run *text* through every rule and report which ones changed it."""
        rules = self._rules  # single snapshot; never re-read mid-run
        current = text
        applied: list[str] = []
        for r in rules:
            result = r.apply(current)
            if result is not current and result != current:
                applied.append(r.name)
                current = result
        if not applied:
            return SanitizeOutcome(text=text)
        logger.debug("Sanitize rules changed text: %s", applied)
        return SanitizeOutcome(text=current, changed=True, applied_rules=tuple(applied))

    def apply(self, text: str) -> str:
        """Run *text* through every rule. Returns *text* itself when unchanged."""
        return self.apply_with_outcome(text).text

    def sanitize_outbound(self, text: str) -> str:
        """Sanitize text about to be placed on the system clipboard."""
        return self.apply(text)

    def sanitize_inbound(self, text: str) -> str:
        """Sanitize text arriving from a paste."""
        return self.apply(text)
