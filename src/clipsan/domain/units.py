"""Insertable units — what the composer widget receives for an inbound paste.

A completed paste resolves to exactly one of three units:

- :class:`TextUnit`: text to insert verbatim.
- :class:`PlaceholderUnit`: a short token standing in for a large paste;
  the full text lives in the paste store under ``id``.
- :class:`ImageUnit`: an image attachment, described but not decoded.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from clipsan.domain.types import ImageSource


class ImageDescriptor(BaseModel):
    """Metadata for a pasted image.

    Attributes:
        source: ``path`` for a pasted filesystem path, ``data`` for raw bytes.
        format: Lowercase format name (``png``, ``jpeg``, ...).
        path: Resolved file path when ``source`` is ``path``.
        byte_length: Payload size when ``source`` is ``data``.
    """

    model_config = {"frozen": True}

    source: ImageSource
    format: str
    path: Path | None = None
    byte_length: int | None = None


class TextUnit(BaseModel):
    """Plain text to insert at the cursor."""

    model_config = {"frozen": True}

    kind: Literal["text"] = "text"
    text: str


class PlaceholderUnit(BaseModel):
    """Placeholder token inserted in place of an oversized paste."""

    model_config = {"frozen": True}

    kind: Literal["placeholder"] = "placeholder"
    id: str
    char_count: int


class ImageUnit(BaseModel):
    """Image element to attach instead of inserting text."""

    model_config = {"frozen": True}

    kind: Literal["image"] = "image"
    descriptor: ImageDescriptor


InsertableUnit = Annotated[
    TextUnit | PlaceholderUnit | ImageUnit,
    Field(discriminator="kind"),
]
