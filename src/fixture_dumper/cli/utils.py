"""
CLI utility helpers — output formatting.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from fixture_dumper.core.errors import FixtureDumperError

console = Console()
err_console = Console(stderr=True)


def fail(error: FixtureDumperError, *, as_json: bool = False) -> None:
    """Print *error* with its context and exit with status 1."""
    if as_json:
        console.print_json(json.dumps(error.to_dict(), default=str))
    else:
        err_console.print(f"[bold red]Error[/bold red] ({error.category.value}): {error.message}")
        for key, value in error.context.to_dict().items():
            err_console.print(f"  [dim]{key}:[/dim] {value}")
    raise typer.Exit(code=1)


def print_written(paths: list[Path], *, as_json: bool = False) -> None:
    """Render the list of written fixture files."""
    if as_json:
        console.print_json(json.dumps({"written": [str(p) for p in paths]}))
        return

    if not paths:
        console.print("[dim]No fixtures written.[/dim]")
        return

    table = Table(title="Fixtures", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("File")
    table.add_column("Bytes", justify="right")
    for index, path in enumerate(paths, start=1):
        table.add_row(str(index), str(path), str(path.stat().st_size))
    console.print(table)
