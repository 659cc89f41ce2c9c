"""Root CLI group for clipsan with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from clipsan import __version__
from clipsan.commands import register_commands
from clipsan.commands._context import AppContext
from clipsan.config.settings import ClipsanSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="clipsan")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging for clipsan.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write logs to this file instead of stderr.",
)
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    log_file: Path | None,
    config_path: str | None,
) -> None:
    """clipsan — clipboard text sanitization and paste handling."""
    flags: dict[str, object] = {
        "json_output": json_output,
        "verbose": verbose,
        "log_json": log_json,
    }
    if log_file is not None:
        flags["log_file"] = log_file
    try:
        settings = ClipsanSettings.from_cli(config_path=config_path, **flags)
    except ValidationError as exc:
        msg = f"Invalid configuration: {exc}"
        raise click.ClickException(msg) from exc

    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
