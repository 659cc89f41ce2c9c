"""Rich Console factory and theme for clipsan output.

Everything is rendered into a StringIO-backed Console and returned as a
string, so commands decide where output goes. Rich drops color codes on
its own when stdout is not a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console, RenderableType
from rich.theme import Theme

CLIPSAN_THEME = Theme(
    {
        "clip.kind.text": "green",
        "clip.kind.placeholder": "bold yellow",
        "clip.kind.image": "bold magenta",
        "clip.rule": "bold cyan",
        "clip.index": "dim",
        "clip.key": "dim",
    }
)

_KIND_STYLES: dict[str, str] = {
    "text": "clip.kind.text",
    "placeholder": "clip.kind.placeholder",
    "image": "clip.kind.image",
}

DEFAULT_WIDTH = 120


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a themed Console writing to an in-memory buffer."""
    return Console(
        file=StringIO(),
        theme=CLIPSAN_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    """Everything *console* has rendered so far."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        msg = "get_output() needs a console from create_console()"
        raise TypeError(msg)
    return buffer.getvalue()


def render(*renderables: RenderableType, sep: str = " ") -> str:
    """Render *renderables* on one fresh console; trailing newlines are dropped."""
    console = create_console()
    console.print(*renderables, sep=sep, soft_wrap=True)
    return get_output(console).rstrip("\n")


def style_for_kind(kind: str) -> str:
    """Return the Rich style name for an insertable unit kind."""
    return _KIND_STYLES.get(kind, "")
