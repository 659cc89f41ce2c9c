"""Commands: outbound copy and inbound paste through the sanitize pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from clipsan.commands._base import read_stdin_bytes, read_stdin_text, with_examples
from clipsan.domain.types import PasteAction

if TYPE_CHECKING:
    from clipsan.commands._context import AppContext


@click.command()
@with_examples(
    """\
  some-command | clipsan copy | pbcopy
  clipsan copy --raw < transcript.txt"""
)
@click.option("--raw", is_flag=True, help="Bypass every sanitize rule.")
@click.pass_obj
def copy(app: AppContext, raw: bool) -> None:
    """Sanitize stdin for placing on the system clipboard."""
    text = read_stdin_text()
    app.emit_text(app.paste_context.copy_to_clipboard(text, raw=raw))


@click.command()
@with_examples(
    """\
  pbpaste | clipsan paste
  pbpaste | clipsan paste --raw
  clipsan --json paste < screenshot.png"""
)
@click.option("--raw", is_flag=True, help="Raw paste: skip sanitization (images still detected).")
@click.pass_obj
def paste(app: AppContext, raw: bool) -> None:
    """Dispatch stdin as an inbound paste and print the resulting unit."""
    payload = read_stdin_bytes()
    action = PasteAction.RAW if raw else PasteAction.SANITIZED
    app.emit_unit(app.paste_context.handle_inbound_paste(payload, action=action))
