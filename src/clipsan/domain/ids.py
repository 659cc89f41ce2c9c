"""Placeholder id patterns and generation.

A placeholder id is the literal token inserted into the document in place
of an oversized paste: ``[Pasted Content 1234 chars]``. When the same size
is pasted more than once, later ids carry a ``#N`` suffix so every live id
in a store is unique: ``[Pasted Content 1234 chars #2]``.

INVARIANT: An id never changes once issued.
"""

from __future__ import annotations

import re

PLACEHOLDER_PATTERN: re.Pattern[str] = re.compile(
    r"\[Pasted Content (?P<count>\d+) chars(?: #(?P<seq>\d+))?\]"
)


def format_placeholder(char_count: int, seq: int = 1) -> str:
    """Build the placeholder token for a paste of *char_count* characters.

    Examples:
        >>> format_placeholder(1001)
        '[Pasted Content 1001 chars]'
        >>> format_placeholder(1001, 3)
        '[Pasted Content 1001 chars #3]'
    """
    if seq <= 1:
        return f"[Pasted Content {char_count} chars]"
    return f"[Pasted Content {char_count} chars #{seq}]"


def validate_placeholder(token: str) -> bool:
    """Check whether *token* is a well-formed placeholder id."""
    return PLACEHOLDER_PATTERN.fullmatch(token) is not None
