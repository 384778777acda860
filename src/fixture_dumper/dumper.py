"""
Dump Orchestrator — drives one full dump run.

Manifesto:
    A dump is all-or-nothing per entity: an entity's fixture is either
    completely rendered or not produced at all. Fixtures are yielded as soon
    as they are complete, so a failure half-way leaves the files of earlier
    entities on disk and writes nothing for the rest.

Architecture:
    ::

        Dumper.dump(path, format)
          │
          ├── object_manager.all_entity_descriptors()
          ├── DumpOrderResolver.resolve(descriptors)         (once)
          ├── ReferenceRegistry()                            (one per run)
          │
          └── for descriptor in plan.order:
                ├── entity_filter(descriptor)? ── no ──► skip
                ├── object_manager.all_instances(descriptor)
                │         └── empty ──► skip
                ├── generator.generate(descriptor, instances)
                │         └── Navigator ─► HandlerRegistry ─► Visitor
                └── MULTIPLE_FILES ─► RenderedFixture ─► FixtureWriter
                    SINGLE_FILE    ─► accumulate; one fixture after the loop

Single-file mode joins entity texts with a blank line and names the result
with ``generator.create_filename(last_processed, multiple_files=False)``;
the built-in generators return a fixed ``fixtures.<ext>`` there.

Tags:
    fixture-dumper, orchestrator, dump, run

Doc-Types:
    api-reference
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from fixture_dumper.converter.handlers import HandlerRegistry
from fixture_dumper.converter.navigator import Navigator
from fixture_dumper.converter.references import ReferenceRegistry
from fixture_dumper.core.logging import LogContext, get_logger
from fixture_dumper.filtering import EntityFilter
from fixture_dumper.generators import AbstractGenerator, format_names, get_generator
from fixture_dumper.metadata.descriptors import EntityDescriptor
from fixture_dumper.metadata.protocol import ObjectManager
from fixture_dumper.naming import DefaultNamingStrategy, NamingStrategy
from fixture_dumper.ordering import DumpOrderResolver
from fixture_dumper.writer import FixtureWriter

logger = get_logger(__name__)

EntityPredicate = Callable[[EntityDescriptor], bool]


class DumpMode(str, Enum):
    """One fixture file per entity, or everything in one file."""

    MULTIPLE_FILES = "multiple"
    SINGLE_FILE = "single"


@dataclass(frozen=True)
class RenderedFixture:
    """Fixture text ready for the writer."""

    filename: str
    content: str
    entities: tuple[str, ...] = ()


class Dumper:
    """
    Dumps every entity known to an object manager.

    Example:
        dumper = Dumper(SqlAlchemyObjectManager(session, Base))
        dumper.dump("fixtures/", "yml", entity_filter=EntityFilter(blacklist=["AuditLog"]))
    """

    def __init__(
        self,
        object_manager: ObjectManager,
        handler_registry: HandlerRegistry | None = None,
        *,
        resolver: DumpOrderResolver | None = None,
        writer: FixtureWriter | None = None,
        naming_strategy: NamingStrategy | None = None,
        generator_factory: Callable[..., AbstractGenerator] = get_generator,
    ):
        self.object_manager = object_manager
        self.handler_registry = handler_registry or HandlerRegistry.with_defaults()
        self.resolver = resolver or DumpOrderResolver()
        self.writer = writer or FixtureWriter()
        self.naming_strategy = naming_strategy or DefaultNamingStrategy()
        self._generator_factory = generator_factory

    def create_generator(self, format: str) -> AbstractGenerator:
        return self._generator_factory(format, naming_strategy=self.naming_strategy)

    def iter_fixtures(
        self,
        descriptors: Iterable[EntityDescriptor] | None = None,
        mode: DumpMode = DumpMode.MULTIPLE_FILES,
        entity_filter: EntityPredicate | None = None,
        format: str = "yml",
        options: dict[str, Any] | None = None,
        registry: ReferenceRegistry | None = None,
    ) -> Iterator[RenderedFixture]:
        """Lazily render fixtures in dump order.

        *registry* defaults to a fresh registry; pass one to share names with
        instances resolved before the run.
        """
        options = dict(options or {})
        mode = DumpMode(mode)
        generator = self.create_generator(format)
        if descriptors is None:
            descriptors = self.object_manager.all_entity_descriptors()
        if entity_filter is None:
            entity_filter = EntityFilter(object_manager=self.object_manager)

        plan = self.resolver.resolve(descriptors)
        excluded = {d.name for d in plan.order if not entity_filter(d)}

        if registry is None:
            registry = ReferenceRegistry(model_name=self.naming_strategy.model_name)
        # handlers may be registered under any alias of the format
        names = [generator.format or format.lower(), format.lower(), *format_names(type(generator))]
        names = list(dict.fromkeys(names))
        generator.set_navigator(
            Navigator(
                self.handler_registry,
                names[0],
                registry,
                format_aliases=names[1:],
                descriptors=plan.order,
                excluded=excluded,
                accessor=self.object_manager.get_value,
                inline_new_targets=options.get("inline", generator.inline_new_targets),
            )
        )

        texts: list[str] = []
        rendered: list[str] = []
        last: EntityDescriptor | None = None

        for descriptor in plan.order:
            if descriptor.name in excluded:
                logger.debug("dumper.entity_skipped", entity=descriptor.name, reason="filtered")
                continue

            instances = self.object_manager.all_instances(descriptor)
            if not instances:
                logger.debug("dumper.entity_skipped", entity=descriptor.name, reason="empty")
                continue
            last = descriptor

            text = generator.generate(descriptor, instances, options)
            logger.info("dumper.entity_rendered", entity=descriptor.name, instances=len(instances))

            if mode is DumpMode.MULTIPLE_FILES:
                yield RenderedFixture(
                    filename=generator.create_filename(descriptor, multiple_files=True),
                    content=generator.prepare_for_write(text),
                    entities=(descriptor.name,),
                )
            else:
                texts.append(text.rstrip("\n"))
                rendered.append(descriptor.name)

        if mode is DumpMode.SINGLE_FILE and texts and last is not None:
            yield RenderedFixture(
                filename=generator.create_filename(last, multiple_files=False),
                content=generator.prepare_for_write("\n\n".join(texts)),
                entities=tuple(rendered),
            )

        logger.info(
            "dumper.run_completed",
            entities=len(plan.order) - len(excluded),
            excluded=len(excluded),
            references=len(registry),
            cycles=len(plan.cycles),
        )

    def run(
        self,
        descriptors: Iterable[EntityDescriptor] | None = None,
        mode: DumpMode = DumpMode.MULTIPLE_FILES,
        entity_filter: EntityPredicate | None = None,
        format: str = "yml",
        options: dict[str, Any] | None = None,
        registry: ReferenceRegistry | None = None,
    ) -> list[RenderedFixture]:
        """Render every fixture of the run."""
        return list(self.iter_fixtures(descriptors, mode, entity_filter, format, options, registry))

    def dump(
        self,
        path: Path | str,
        format: str = "yml",
        mode: DumpMode = DumpMode.MULTIPLE_FILES,
        entity_filter: EntityPredicate | None = None,
        options: dict[str, Any] | None = None,
    ) -> list[Path]:
        """Render and write fixtures to *path*; returns the written files."""
        written: list[Path] = []
        with LogContext(run_id=uuid.uuid4().hex[:12], format=format):
            logger.info("dumper.started", path=str(path), mode=DumpMode(mode).value)
            for fixture in self.iter_fixtures(None, mode, entity_filter, format, options):
                written.append(self.writer.write(path, fixture.filename, fixture.content))
        return written
