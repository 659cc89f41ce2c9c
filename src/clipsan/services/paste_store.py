"""PasteStore — full text held behind placeholder tokens.

An oversized paste is replaced in the document by a short placeholder id;
the store keeps the verbatim text until the document is submitted, the
placeholder is deleted, or the store is cleared.

INVARIANT: ``resolve`` never substitutes empty text for an unknown id.
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel

from clipsan.domain.errors import PlaceholderNotFoundError
from clipsan.domain.ids import PLACEHOLDER_PATTERN, format_placeholder

logger = logging.getLogger(__name__)


class PlaceholderEntry(BaseModel):
    """A stored oversized paste."""

    model_config = {"frozen": True}

    id: str
    full_text: str
    char_count: int


class PasteStore:
    """Maps placeholder ids to the full text they stand for."""

    def __init__(self) -> None:
        self._entries: dict[str, PlaceholderEntry] = {}
        # Last sequence number issued per char count; never rolled back.
        self._issued: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, placeholder_id: object) -> bool:
        return placeholder_id in self._entries

    def entries(self) -> list[PlaceholderEntry]:
        """Live entries in insertion order."""
        return list(self._entries.values())

    def add(self, text: str) -> PlaceholderEntry:
        """Store *text* under a freshly generated, unique placeholder id.

        Ids are never reissued for the life of the store, even after
        ``discard``, ``prune`` or ``clear``, so a stale token can only fail
        to resolve rather than resolve to another paste.
        """
        char_count = len(text)
        seq = self._issued.get(char_count, 0) + 1
        self._issued[char_count] = seq
        placeholder_id = format_placeholder(char_count, seq)

        entry = PlaceholderEntry(id=placeholder_id, full_text=text, char_count=char_count)
        self._entries[placeholder_id] = entry
        logger.debug("Stored large paste as %s", placeholder_id)
        return entry

    def resolve(self, placeholder_id: str) -> str:
        """Return the verbatim text behind *placeholder_id*.

        Raises:
            PlaceholderNotFoundError: If the id was never issued or was cleared.
        """
        entry = self._entries.get(placeholder_id)
        if entry is None:
            raise PlaceholderNotFoundError(placeholder_id)
        return entry.full_text

    def expand(self, document: str) -> str:
        """Replace every live placeholder id in *document* with its full text.

        Tokens that look like placeholders but have no live entry are kept
        as typed. Substitution is a single pass, so pasted text that itself
        contains a placeholder-shaped token is never expanded again.
        """

        def _substitute(match: re.Match[str]) -> str:
            entry = self._entries.get(match.group(0))
            return match.group(0) if entry is None else entry.full_text

        return PLACEHOLDER_PATTERN.sub(_substitute, document)

    def prune(self, document: str) -> list[str]:
        """Drop entries whose ids no longer appear in *document*.

        Returns the removed ids.
        """
        removed = [pid for pid in self._entries if pid not in document]
        for pid in removed:
            del self._entries[pid]
        if removed:
            logger.debug("Pruned %d orphaned placeholder(s)", len(removed))
        return removed

    def discard(self, placeholder_id: str) -> None:
        """Remove a single entry. Unknown ids are ignored."""
        self._entries.pop(placeholder_id, None)

    def clear(self) -> None:
        """Remove every entry. Issued ids stay retired."""
        self._entries.clear()
