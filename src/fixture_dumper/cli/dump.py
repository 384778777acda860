"""
CLI: ``fixture-dumper dump`` and ``fixture-dumper formats``.

Every option falls back to the matching ``FIXTURE_DUMPER_*`` setting.
"""

from __future__ import annotations

from pathlib import Path

import typer

from fixture_dumper.cli.utils import console, err_console, fail, print_written
from fixture_dumper.core.errors import FixtureDumperError


def dump(
    models: str | None = typer.Option(
        None, "--models", "-m", help="Importable module declaring the mapped classes"
    ),
    database: str | None = typer.Option(None, "--database", "-d", help="Database URL"),
    path: Path | None = typer.Option(None, "--path", "-p", help="Output directory"),
    format: str | None = typer.Option(None, "--format", "-f", help="Fixture format (yml, json)"),
    single_file: bool | None = typer.Option(
        None, "--single-file/--multiple-files", help="One file for all entities"
    ),
    namespace: list[str] | None = typer.Option(
        None, "--namespace", "-n", help="Only dump entities from this namespace (repeatable)"
    ),
    whitelist: list[str] | None = typer.Option(
        None, "--whitelist", "-w", help="Only dump these entities (repeatable)"
    ),
    blacklist: list[str] | None = typer.Option(
        None, "--blacklist", "-b", help="Never dump these entities (repeatable)"
    ),
    base: str | None = typer.Option(None, "--base", help="Declarative base attribute name"),
    inline: bool = typer.Option(
        False, "--inline", help="Inline associated objects seen for the first time"
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Dump every entity of a SQLAlchemy model into fixture files."""
    from sqlalchemy.orm import Session

    from fixture_dumper.core.config import get_settings
    from fixture_dumper.core.logging import configure_logging
    from fixture_dumper.dumper import Dumper, DumpMode
    from fixture_dumper.filtering import EntityFilter
    from fixture_dumper.metadata.orm import (
        SqlAlchemyObjectManager,
        create_dumper_engine,
        load_registry,
    )

    settings = get_settings()
    try:
        configure_logging(
            level=log_level or settings.log_level,
            json_format=settings.log_format == "json",
        )
    except FixtureDumperError as e:
        fail(e, as_json=json_out)

    models = models or settings.models
    if not models:
        err_console.print("[bold red]Error[/bold red]: no models module given (--models)")
        raise typer.Exit(code=2)

    single = settings.single_file if single_file is None else single_file
    mode = DumpMode.SINGLE_FILE if single else DumpMode.MULTIPLE_FILES
    output = path or settings.output_path
    fmt = (format or settings.format).lower()

    try:
        registry = load_registry(models, base or settings.base)
        engine = create_dumper_engine(database or settings.database_url)
        try:
            with Session(engine) as session:
                manager = SqlAlchemyObjectManager(session, registry)
                entity_filter = EntityFilter(
                    namespaces=namespace or settings.namespaces,
                    whitelist=whitelist or settings.whitelist,
                    blacklist=blacklist or settings.blacklist,
                    object_manager=manager,
                )
                written = Dumper(manager).dump(
                    output, fmt, mode, entity_filter, options={"inline": inline}
                )
        finally:
            engine.dispose()
    except FixtureDumperError as e:
        fail(e, as_json=json_out)
        return

    print_written(written, as_json=json_out)


def formats(
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """List registered fixture formats."""
    from fixture_dumper.generators import get_generator_class, list_formats

    names = list_formats()
    if json_out:
        console.print_json(data={"formats": names})
        return
    for name in names:
        console.print(f"{name}  [dim]{get_generator_class(name).__name__}[/dim]")
