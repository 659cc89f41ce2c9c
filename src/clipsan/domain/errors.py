"""Exception hierarchy for clipsan.

Rules, the burst detector and the dispatcher never raise: an absent image
is a fallback branch and an untouched text is a valid rule result. The
only runtime failure surfaced to callers is an unresolved placeholder;
the others are raised while loading configuration.
"""

from __future__ import annotations


class ClipsanError(Exception):
    """Base class for all clipsan errors."""


class PlaceholderNotFoundError(ClipsanError, KeyError):
    """Raised when a placeholder id has no live entry in the paste store.

    Signals a state-management bug in the caller (the entry was cleared or
    never created). Never substituted with empty text.
    """

    def __init__(self, placeholder_id: str) -> None:
        super().__init__(placeholder_id)
        self.placeholder_id = placeholder_id

    def __str__(self) -> str:
        return f"No pasted content stored for placeholder {self.placeholder_id!r}"


class RuleConfigError(ClipsanError, ValueError):
    """Raised when configuration names a rule that is not registered."""


class ConfigFileError(ClipsanError, ValueError):
    """Raised when a config file exists but cannot be parsed."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"Invalid TOML in {path}: {reason}")
        self.path = path
