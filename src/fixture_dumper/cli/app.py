"""
Root Typer application for the fixture-dumper CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

app = Typer(
    name="fixture-dumper",
    help="fixture-dumper — dump database entities into editable fixture files.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from fixture_dumper import __version__

        typer.echo(f"fixture-dumper {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """fixture-dumper CLI — dump entities, list formats."""


# ── Command registration ─────────────────────────────────────────────────

from fixture_dumper.cli.dump import dump, formats  # noqa: E402

app.command("dump", help="Dump entities into fixture files.")(dump)
app.command("formats", help="List registered fixture formats.")(formats)
