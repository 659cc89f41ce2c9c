"""Image interpretation of clipboard payloads.

Two shapes are recognized without decoding anything:

- Binary data whose leading bytes carry a known image signature.
- A single pasted filesystem path (plain, quoted, shell-escaped, or a
  ``file://`` URL) pointing at an existing file with an image extension.

Anything else is not an image; callers fall back to text handling.
"""

from __future__ import annotations

import logging
import re
import shlex
from pathlib import Path
from typing import NamedTuple
from urllib.parse import unquote, urlparse

logger = logging.getLogger(__name__)

_WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:[\\/]")

IMAGE_EXTENSIONS: dict[str, str] = {
    ".png": "png",
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
    ".gif": "gif",
    ".webp": "webp",
    ".bmp": "bmp",
    ".tif": "tiff",
    ".tiff": "tiff",
}

_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", "png"),
    (b"\xff\xd8\xff", "jpeg"),
    (b"GIF87a", "gif"),
    (b"GIF89a", "gif"),
    (b"II*\x00", "tiff"),
    (b"MM\x00*", "tiff"),
)


def sniff_image_format(data: bytes) -> str | None:
    """Return the image format encoded in *data*'s header, or None."""
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "webp"
    # "BM" alone is too common in text; require the zeroed reserved field.
    if data[:2] == b"BM" and len(data) >= 26 and data[6:10] == b"\x00\x00\x00\x00":
        return "bmp"
    for signature, fmt in _SIGNATURES:
        if data.startswith(signature):
            return fmt
    return None


def normalize_pasted_path(text: str) -> Path | None:
    """Interpret *text* as a single pasted path.

    Accepts ``file://`` URLs, quoted paths and shell-escaped paths as
    produced by terminal drag-and-drop. Returns None for anything that is
    not exactly one path-like token.

    Examples:
        >>> normalize_pasted_path("file:///tmp/shot%201.png")
        PosixPath('/tmp/shot 1.png')
        >>> normalize_pasted_path("two words") is None
        True
    """
    candidate = text.strip()
    if not candidate or "\n" in candidate:
        return None

    if candidate.startswith("file://"):
        parsed = urlparse(candidate)
        if parsed.netloc not in ("", "localhost"):
            return None
        return Path(unquote(parsed.path))

    unquoted = candidate.strip("\"'")
    if _WINDOWS_DRIVE.match(unquoted):
        return Path(unquoted)

    try:
        parts = shlex.split(candidate)
    except ValueError:
        return None
    if len(parts) != 1:
        return None
    try:
        return Path(parts[0]).expanduser()
    except RuntimeError:
        # ~name for a user that does not exist
        return None


class ImageMatch(NamedTuple):
    """An image recognized in a clipboard payload."""

    format: str
    path: Path | None = None
    byte_length: int | None = None


def detect_image(payload: str | bytes) -> ImageMatch | None:
    """Return an :class:`ImageMatch` when *payload* is an image."""
    if isinstance(payload, bytes):
        fmt = sniff_image_format(payload)
        if fmt is None:
            return None
        logger.debug("Detected %s image data (%d bytes)", fmt, len(payload))
        return ImageMatch(format=fmt, byte_length=len(payload))

    path = normalize_pasted_path(payload)
    if path is None:
        return None
    fmt = IMAGE_EXTENSIONS.get(path.suffix.lower())
    if fmt is None:
        return None
    try:
        if not path.is_file():
            return None
    except OSError:
        return None
    logger.debug("Detected pasted image path %s", path)
    return ImageMatch(format=fmt, path=path)
