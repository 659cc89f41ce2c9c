"""Shared Click helpers for clipsan commands.

``--examples`` prints usage examples and exits, keeping ``--help`` concise
while making examples available on demand.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import Any, TypeVar

import click

F = TypeVar("F", bound=Callable[..., Any])


def with_examples(examples: str) -> Callable[[F], F]:
    """Attach an eager ``--examples`` flag that prints *examples* and exits."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    return click.option(
        "--examples",
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show_examples,
        help="Show usage examples.",
    )


def read_stdin_text() -> str:
    """Read all of stdin as UTF-8 text, keeping line endings as they arrive."""
    return read_stdin_bytes().decode("utf-8", errors="replace")


def read_stdin_bytes() -> bytes:
    """Read all of stdin as bytes (image payloads)."""
    return sys.stdin.buffer.read()
