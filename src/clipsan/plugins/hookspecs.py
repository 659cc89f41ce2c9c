"""Pluggy hook specifications for clipsan.

One setup-time hook lets plugins contribute sanitization rules; one
notification hook fires after each dispatched inbound paste.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from clipsan.domain.rules import Rule

hookspec = pluggy.HookspecMarker("clipsan")


class ClipsanHookSpec:
    """Hook specifications for the clipsan plugin system."""

    @hookspec
    def register_rules(self) -> list[Rule] | None:
        """Return rules to append after the configured built-in rules."""

    @hookspec
    def post_paste(self, kind: str, char_count: int) -> None:
        """Called after each inbound paste is dispatched.

        *kind* is the resulting unit kind: ``text``, ``placeholder`` or ``image``.
        *char_count* is 0 for images.
        """
