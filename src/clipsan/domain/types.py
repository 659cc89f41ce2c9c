"""Classification enums shared across the domain and service layers."""

from __future__ import annotations

from enum import StrEnum


class PasteAction(StrEnum):
    """Which paste binding the user invoked."""

    SANITIZED = "sanitized"
    RAW = "raw"


class UnitKind(StrEnum):
    """Kinds of insertable units produced by the dispatcher."""

    TEXT = "text"
    PLACEHOLDER = "placeholder"
    IMAGE = "image"


class ImageSource(StrEnum):
    """Where an inbound image came from."""

    PATH = "path"
    DATA = "data"


class BurstOutputKind(StrEnum):
    """What a burst-detector flush represents."""

    TYPED = "typed"
    PASTE = "paste"
