#!/usr/bin/env python3
"""
Elemental command line.

Entry point for the three parts of the project:
1. ``serve``     - the backend listener
2. ``devserver`` - the development server with its ``/api`` proxy
3. ``theme``     - the element color theme, as JSON or CSS
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
import uvicorn
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from elemental.backend.cli import check_deps
from elemental.backend.core.utils.config import ConfigError, load_settings
from elemental.backend.core.utils.logging_setup import setup_logging

console = Console()


def _fail(ctx: click.Context, error: Exception):
    console.print(f"\n[bold red]Configuration error:[/bold red] {escape(str(error))}")
    if ctx.obj["debug"]:
        raise error
    raise SystemExit(1) from error


def _load(ctx: click.Context):
    """Load settings, turning config problems into a clean exit."""
    try:
        return load_settings(ctx.obj["config"])
    except (FileNotFoundError, ConfigError) as e:
        _fail(ctx, e)


def _override(ctx: click.Context, settings, host: str | None, port: int | None):
    """Apply --host/--port, re-running the field validators."""
    updates = {k: v for k, v in {"host": host, "port": port}.items() if v is not None}
    try:
        return type(settings).model_validate({**settings.model_dump(), **updates})
    except ValidationError as e:
        _fail(ctx, ConfigError(str(e)))


def _serving_logs(ctx: click.Context) -> None:
    # Startup lines are logged at INFO by the apps themselves
    setup_logging(min(ctx.obj["log_level"], logging.INFO), ctx.obj["log_file"])


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(),
    default=None,
    help="Path to configuration file (default: $ELEMENTAL_CONFIG or configs/default_config.yaml).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode with additional logging.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write every log record (DEBUG and above) to this file.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config: str | None,
    verbose: bool,
    debug: bool,
    log_file: Path | None,
):
    """Run the Elemental backend, dev server, or theme tools."""
    log_level = logging.DEBUG if debug else (logging.INFO if verbose else logging.WARNING)
    setup_logging(log_level, log_file)
    ctx.ensure_object(dict)
    ctx.obj.update(config=config, debug=debug, log_level=log_level, log_file=log_file)


@main.command()
@click.option("--host", type=str, default=None, help="Interface to bind (default from config).")
@click.option("--port", "-p", type=int, default=None, help="Port to bind (default from config).")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None):
    """Run the backend listener."""
    from elemental.backend.api.app import create_app

    settings = _override(ctx, _load(ctx).backend, host, port)

    _serving_logs(ctx)
    # Port already in use: uvicorn logs it and exits non-zero
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


@main.command()
@click.option("--host", type=str, default=None, help="Interface to bind (default from config).")
@click.option("--port", "-p", type=int, default=None, help="Port to bind (default from config).")
@click.pass_context
def devserver(ctx: click.Context, host: str | None, port: int | None):
    """Run the development server and its proxy rules."""
    from elemental.frontend.devserver import create_app

    settings = _override(ctx, _load(ctx).devserver, host, port)

    try:
        application = create_app(settings)
    except ConfigError as e:
        _fail(ctx, e)

    _serving_logs(ctx)
    uvicorn.run(application, host=settings.host, port=settings.port, log_config=None)


@main.command()
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "css"]),
    default="json",
    help="Output format.",
)
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="List the content files under this directory and the element colors they use.",
)
@click.pass_context
def theme(ctx: click.Context, fmt: str, root: Path | None):
    """Print the element color theme."""
    from elemental.theme import content_files, tailwind_config, to_css_variables, used_colors

    content = _load(ctx).theme.content

    if root is not None:
        files = content_files(root, content)
        console.print(f"[bold cyan]{len(files)} content file(s) under {root}[/bold cyan]")
        for path in files:
            console.print(f"  {path.relative_to(root)}", highlight=False)
        colors = sorted(used_colors(root, content))
        console.print(f"  Colors in use: {', '.join(colors) if colors else 'none'}")
        return

    # Plain echo: the output is meant to be piped into the JS toolchain
    if fmt == "css":
        click.echo(to_css_variables(), nl=False)
    else:
        click.echo(json.dumps(tailwind_config(content), indent=2))


@main.command("check-deps")
def check_deps_command():
    """Verify every runtime dependency can be imported."""
    raise SystemExit(check_deps.main())


if __name__ == "__main__":
    main()
