"""Paste-burst detection for terminals without bracketed paste.

Such terminals deliver a paste as a stream of ordinary key events; the only
observable difference from typing is timing. The detector aggregates a run
of characters whose inter-event gaps are too small for a human into one
logical paste.

States:

- ``Idle``: nothing buffered, or a single *held* character waiting to see
  whether the next event arrives fast enough to start a burst.
- ``Accumulating``: a burst is in progress; characters (and Enter) append.

Time is supplied by the host (``time.monotonic()`` seconds). There is no
background timer: a due flush happens on the next event, on an explicit
:meth:`PasteBurstDetector.tick`, or on :meth:`PasteBurstDetector.flush_pending`.

INVARIANT: Buffered characters are never discarded. Every exit from a
buffered state either flushes them or appends to them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from clipsan.domain.types import BurstOutputKind

logger = logging.getLogger(__name__)


@dataclass
class BurstState:
    """Mutable detector state. Inspect via :attr:`PasteBurstDetector.state`."""

    buffer: list[str] = field(default_factory=list)
    last_event_time: float | None = None
    active: bool = False


@dataclass(frozen=True)
class BurstOutput:
    """Text released by the detector.

    ``TYPED`` output is an ordinary keystroke to insert as typed; ``PASTE``
    output is one logical paste to hand to the dispatcher.
    """

    kind: BurstOutputKind
    text: str


class PasteBurstDetector:
    """Timing-based state machine aggregating key-event pastes.

    Parameters:
        char_interval_ms: Largest gap between a held character and the next
            one for the pair to start a burst.
        active_idle_timeout_ms: Largest gap between characters while a burst
            is accumulating; a longer gap ends the burst.
        enter_suppress_window_ms: How long after the last burst character an
            Enter should still insert a newline rather than submit.
    """

    def __init__(
        self,
        *,
        char_interval_ms: float = 8,
        active_idle_timeout_ms: float = 8,
        enter_suppress_window_ms: float = 120,
    ) -> None:
        self._char_interval = char_interval_ms / 1000
        self._active_idle_timeout = active_idle_timeout_ms / 1000
        self._enter_suppress_window = enter_suppress_window_ms / 1000
        self._state = BurstState()
        self._last_burst_time: float | None = None

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> BurstState:
        """A copy of the current state."""
        return BurstState(
            buffer=list(self._state.buffer),
            last_event_time=self._state.last_event_time,
            active=self._state.active,
        )

    @property
    def is_accumulating(self) -> bool:
        return self._state.active

    @property
    def is_idle(self) -> bool:
        """True when nothing is buffered or held."""
        return not self._state.active and not self._state.buffer

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_char(self, ch: str, now: float) -> list[BurstOutput]:
        """Feed one plain character event.

        Returns any text released by this event, in order. An empty list
        means the character is buffered (held or accumulating).
        """
        outputs: list[BurstOutput] = []
        state = self._state
        gap = self._gap(now)

        if state.active:
            if gap <= self._active_idle_timeout:
                state.buffer.append(ch)
                state.last_event_time = now
                self._last_burst_time = now
                return outputs
            outputs.append(self._flush())
        elif state.buffer:
            if gap <= self._char_interval:
                state.active = True
                state.buffer.append(ch)
                state.last_event_time = now
                self._last_burst_time = now
                logger.debug("Paste burst started")
                return outputs
            outputs.append(self._flush())

        state.buffer.append(ch)
        state.last_event_time = now
        return outputs

    def on_enter(self, now: float) -> bool:
        """Feed an Enter key event.

        Returns True when the newline joined the burst buffer; the host must
        then neither submit nor insert anything. On False the host should
        :meth:`flush_pending` and handle Enter normally.
        """
        state = self._state
        if not state.buffer:
            return False
        gap = self._gap(now)
        limit = self._active_idle_timeout if state.active else self._char_interval
        if gap > limit:
            return False
        if not state.active:
            state.active = True
            logger.debug("Paste burst started on newline")
        state.buffer.append("\n")
        state.last_event_time = now
        self._last_burst_time = now
        return True

    def newline_should_insert_instead_of_submit(self, now: float) -> bool:
        """Whether an Enter at *now* belongs to a (just finished) paste."""
        if self._state.active:
            return True
        if self._last_burst_time is None:
            return False
        return now - self._last_burst_time <= self._enter_suppress_window

    def tick(self, now: float) -> list[BurstOutput]:
        """Idle-poll: release buffered text whose timeout has elapsed."""
        state = self._state
        if not state.buffer:
            return []
        limit = self._active_idle_timeout if state.active else self._char_interval
        if self._gap(now) <= limit:
            return []
        return [self._flush()]

    def flush_pending(self) -> list[BurstOutput]:
        """Release everything buffered, regardless of timing.

        Call before handling a non-character key and on teardown.
        """
        if not self._state.buffer:
            self._reset()
            return []
        return [self._flush()]

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _gap(self, now: float) -> float:
        last = self._state.last_event_time
        if last is None:
            return float("inf")
        return now - last

    def _flush(self) -> BurstOutput:
        state = self._state
        text = "".join(state.buffer)
        if state.active:
            output = BurstOutput(kind=BurstOutputKind.PASTE, text=text)
            logger.debug("Paste burst flushed: %d chars", len(text))
        else:
            output = BurstOutput(kind=BurstOutputKind.TYPED, text=text)
        self._reset()
        return output

    def _reset(self) -> None:
        self._state.buffer.clear()
        self._state.active = False
        self._state.last_event_time = None
