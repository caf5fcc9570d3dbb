"""Typer-based CLI for generating API docs from route modules."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config_manager import load_settings
from .docs import RENDERERS, write_output
from .errors import RouteDocError, UsageError
from .extractor import collect_routes
from .models import RouteFile

app = typer.Typer(
    help="📚 RouteDoc — generate API documentation from route definitions.",
    add_completion=False,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"RouteDoc v{__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _print_summary(route_files: List[RouteFile]) -> None:
    table = Table(title="Route definitions")
    table.add_column("File", style="cyan")
    table.add_column("Routes", justify="right")
    for route_file in route_files:
        table.add_row(route_file.name, str(len(route_file.routes)))
    Console().print(table)


@app.command()
def generate(
    output_path: Optional[Path] = typer.Argument(
        None, help="Where to write the docs (default: docs/api.md)."
    ),
    routes_dir: Optional[Path] = typer.Option(
        None, "--routes-dir", "-r", help="Directory holding the route modules."
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="TOML config file with a [routedoc] table."
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", min=1, help="Files to read and parse concurrently."
    ),
    output_format: str = typer.Option(
        "markdown", "--format", "-f", help="Artifact format: markdown or json."
    ),
    check: bool = typer.Option(
        False, "--check", help="Extract routes and report counts without writing."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
):
    """Extract route definitions and write them as Markdown or JSON."""
    _configure_logging(verbose)

    try:
        settings = load_settings(config_file).override(
            output=output_path.resolve() if output_path else None,
            routes_dir=routes_dir.resolve() if routes_dir else None,
            workers=workers,
        )
        if not check and settings.output.is_dir():
            raise UsageError(f"Output path is a directory: {settings.output}")
        render = RENDERERS.get(output_format.lower())
        if render is None:
            raise UsageError(f"Unknown format '{output_format}', expected one of: {', '.join(RENDERERS)}")

        route_files = collect_routes(
            settings.routes_dir,
            ignore=settings.ignore,
            max_workers=settings.workers,
        )
        total = sum(len(route_file.routes) for route_file in route_files)

        if check:
            _print_summary(route_files)
            typer.echo(f"✅ {total} route(s) in {len(route_files)} file(s).")
            return

        write_output(render(route_files, settings.title), settings.output)
    except RouteDocError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Wrote {total} route(s) from {len(route_files)} file(s) to {settings.output}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
