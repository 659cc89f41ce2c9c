"""Subcommand modules for clipsan.

Provides register_commands() which uses deferred imports to keep
``clipsan --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from clipsan.commands.clipboard import copy, paste
    from clipsan.commands.rules import rules

    cli.add_command(copy)
    cli.add_command(paste)
    cli.add_command(rules)
