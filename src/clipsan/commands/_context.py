"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Builds the :class:`PasteContext` lazily so ``--help``
and ``--version`` never load plugins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from clipsan.output.formatters import format_rules, format_unit

if TYPE_CHECKING:
    from clipsan.config.settings import ClipsanSettings
    from clipsan.domain.units import InsertableUnit
    from clipsan.services.context import PasteContext


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: ClipsanSettings) -> None:
        self.settings = settings
        self._paste_context: PasteContext | None = None

        from clipsan.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            log_file=settings.log_file,
        )

    @property
    def paste_context(self) -> PasteContext:
        """The paste context (created lazily on first access)."""
        if self._paste_context is None:
            from clipsan.services.context import PasteContext

            self._paste_context = PasteContext.from_settings(self.settings)
        return self._paste_context

    def close(self) -> None:
        """Tear down the paste context, if one was created."""
        if self._paste_context is not None:
            self._paste_context.close()
            self._paste_context = None

    def emit_text(self, text: str) -> None:
        """Write sanitized text to stdout exactly, without an added newline."""
        click.echo(text, nl=False)

    def emit_unit(self, unit: InsertableUnit) -> None:
        """Write a dispatcher result to stdout.

        Text units are written verbatim so the command stays pipeable; in
        JSON mode every unit is serialized.
        """
        if self.settings.json_output:
            click.echo(format_unit(unit, json_output=True))
        elif unit.kind == "text":
            click.echo(format_unit(unit), nl=False)
        else:
            click.echo(format_unit(unit))

    def emit_rules(self) -> None:
        """Write the active rule sequence to stdout."""
        rules = self.paste_context.pipeline.rules
        click.echo(format_rules(rules, json_output=self.settings.json_output))
