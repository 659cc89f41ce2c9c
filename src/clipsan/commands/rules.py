"""Command: list the active sanitize pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from clipsan.commands._base import with_examples

if TYPE_CHECKING:
    from clipsan.commands._context import AppContext


@click.command()
@with_examples(
    """\
  clipsan rules
  clipsan --json rules
  CLIPSAN_SANITIZE__RULES='["strip_prefix_glyph","strip_zero_width"]' clipsan rules"""
)
@click.pass_obj
def rules(app: AppContext) -> None:
    """Show the sanitize rules in execution order, plugin rules included."""
    app.emit_rules()
