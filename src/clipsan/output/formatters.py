"""Rich/JSON output helpers for CLI commands.

Text units are emitted verbatim so ``clipsan paste`` stays pipeable; the
other unit kinds and the rule listing are rendered through Rich, or as
JSON with ``--json``.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING

from pydantic import TypeAdapter
from rich.table import Table
from rich.text import Text

from clipsan.domain.units import ImageUnit, InsertableUnit, PlaceholderUnit, TextUnit
from clipsan.output.console import render, style_for_kind

if TYPE_CHECKING:
    from clipsan.domain.rules import Rule

_UNIT_ADAPTER: TypeAdapter[InsertableUnit] = TypeAdapter(InsertableUnit)


def format_unit(unit: InsertableUnit, *, json_output: bool = False) -> str:
    """Format an insertable unit for display.

    Args:
        unit: The dispatcher result.
        json_output: If True, return JSON; otherwise human-readable text.
    """
    if json_output:
        return _UNIT_ADAPTER.dump_json(unit, indent=2).decode("utf-8")
    if isinstance(unit, TextUnit):
        return unit.text

    label = Text(unit.kind, style=style_for_kind(unit.kind))
    if isinstance(unit, PlaceholderUnit):
        detail = Text(f"  {unit.id}  ({unit.char_count} chars)")
    elif isinstance(unit, ImageUnit):
        descriptor = unit.descriptor
        where = str(descriptor.path) if descriptor.path else f"{descriptor.byte_length} bytes"
        detail = Text(f"  {descriptor.format}  {where}")
    else:  # pragma: no cover - exhaustive over InsertableUnit
        detail = Text("")
    return render(label, detail, sep="")


def format_rules(rules: tuple[Rule, ...] | list[Rule], *, json_output: bool = False) -> str:
    """Format the active rule sequence as a numbered table (or JSON list)."""
    if json_output:
        return _json.dumps({"rules": [r.name for r in rules]}, indent=2)

    table = Table(show_header=True, header_style="clip.key", box=None)
    table.add_column("#", style="clip.index", justify="right")
    table.add_column("rule", style="clip.rule")
    for index, r in enumerate(rules, start=1):
        table.add_row(str(index), r.name)

    return render(table)
