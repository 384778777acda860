"""SQLAlchemy persistence adapter.

Derives :class:`EntityDescriptor` objects from a declarative registry and
loads instances through a ``Session``.

Mapping rules
-------------
* Column attributes become fields. Auto-increment integer primary keys and
  foreign-key columns that back a relationship are skipped; the fixture
  expresses the link through the association instead.
* ``Enum`` columns are *enumerated*, ``ARRAY`` columns *scalar collections*,
  ``JSON`` columns and composites *embedded*.
* Many-to-one relationships are single associations, mandatory when a local
  foreign-key column is ``NOT NULL``. Many-to-many relationships are
  collections and always nullable.
* One-to-many and view-only relationships are skipped: the other side owns
  the link and dumps it.

Tags:
    fixture-dumper, orm, sqlalchemy, metadata, persistence

Doc-Types:
    api-reference
"""

from __future__ import annotations

import importlib
from typing import Any

from sqlalchemy import ARRAY, JSON, Enum, Integer, event, inspect, select
from sqlalchemy import create_engine as _sa_create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import NoInspectionAvailable, SQLAlchemyError
from sqlalchemy.orm import (
    ColumnProperty,
    CompositeProperty,
    Mapper,
    RelationshipDirection,
    RelationshipProperty,
    Session,
    registry as sa_registry,
)

from fixture_dumper.core.errors import ConfigError, PersistenceError
from fixture_dumper.core.logging import get_logger
from fixture_dumper.metadata.descriptors import (
    AssociationDescriptor,
    EntityDescriptor,
    FieldDescriptor,
    FieldKind,
)

logger = get_logger(__name__)


def entity_name(cls: type) -> str:
    """Fully qualified entity name of a mapped class."""
    return f"{cls.__module__}.{cls.__qualname__}"


def create_dumper_engine(url: str, *, echo: bool = False, **kwargs: Any) -> Engine:
    """Create a SQLAlchemy engine for reading the data to dump.

    SQLite connections get foreign keys enabled so the schema behaves like
    the production one.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = _sa_create_engine(url, echo=echo, **kwargs)

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection: Any, _rec: Any) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return _sa_create_engine(url, echo=echo, **kwargs)


def load_registry(module_path: str, attribute: str = "Base") -> sa_registry:
    """Import *module_path* and return the mapper registry of *attribute*.

    *attribute* may name a declarative base class or a ``registry`` object.
    """
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise ConfigError(f"Cannot import models module '{module_path}'", cause=e) from e

    target = getattr(module, attribute, None)
    if target is None:
        raise ConfigError(f"Module '{module_path}' has no attribute '{attribute}'")
    return _as_registry(target)


def _as_registry(target: Any) -> sa_registry:
    if isinstance(target, sa_registry):
        return target
    reg = getattr(target, "registry", None)
    if isinstance(reg, sa_registry):
        return reg
    raise ConfigError(f"{target!r} is neither a declarative base nor a mapper registry")


class SqlAlchemyObjectManager:
    """
    Persistence collaborator backed by a SQLAlchemy ``Session``.

    Example:
        with Session(engine) as session:
            manager = SqlAlchemyObjectManager(session, Base)
            descriptors = manager.all_entity_descriptors()
    """

    def __init__(self, session: Session, base: Any):
        self.session = session
        self.registry = _as_registry(base)
        self._descriptors: list[EntityDescriptor] | None = None

    # --- metadata ---

    def all_entity_descriptors(self) -> list[EntityDescriptor]:
        if self._descriptors is None:
            mappers = sorted(self.registry.mappers, key=self._declaration_key)
            self._descriptors = [self._describe(mapper) for mapper in mappers]
            logger.debug("orm.descriptors_loaded", count=len(self._descriptors))
        return list(self._descriptors)

    def _declaration_key(self, mapper: Mapper) -> tuple[int, str]:
        tables = list(self.registry.metadata.tables)
        table = mapper.local_table
        key = getattr(table, "key", None)
        position = tables.index(key) if key in tables else len(tables)
        return position, entity_name(mapper.class_)

    def _describe(self, mapper: Mapper) -> EntityDescriptor:
        cls = mapper.class_
        backing_columns = set()
        for rel in mapper.relationships:
            if rel.direction is RelationshipDirection.MANYTOONE:
                backing_columns.update(rel.local_columns)
        composite_columns = set()
        for comp in mapper.composites:
            composite_columns.update(comp.columns)

        fields: list[FieldDescriptor] = []
        associations: list[AssociationDescriptor] = []

        for prop in mapper.attrs:
            if isinstance(prop, ColumnProperty):
                column = prop.columns[0]
                if column in backing_columns or column in composite_columns:
                    continue
                if self._is_generated_key(mapper, column):
                    continue
                fields.append(
                    FieldDescriptor(
                        name=prop.key,
                        kind=self._column_kind(column),
                        nullable=bool(getattr(column, "nullable", True)),
                    )
                )
            elif isinstance(prop, CompositeProperty):
                fields.append(FieldDescriptor(name=prop.key, kind=FieldKind.EMBEDDED))
            elif isinstance(prop, RelationshipProperty):
                association = self._describe_relationship(prop)
                if association is not None:
                    associations.append(association)

        return EntityDescriptor(
            name=entity_name(cls),
            namespace=cls.__module__,
            short_name=cls.__name__,
            fields=tuple(fields),
            associations=tuple(associations),
            entity_class=cls,
        )

    @staticmethod
    def _is_generated_key(mapper: Mapper, column: Any) -> bool:
        if not getattr(column, "primary_key", False) or len(mapper.primary_key) != 1:
            return False
        return isinstance(column.type, Integer) and column.autoincrement in (True, "auto")

    @staticmethod
    def _column_kind(column: Any) -> FieldKind:
        column_type = getattr(column, "type", None)
        if isinstance(column_type, Enum):
            return FieldKind.ENUMERATED
        if isinstance(column_type, ARRAY):
            return FieldKind.SCALAR_COLLECTION
        if isinstance(column_type, JSON):
            return FieldKind.EMBEDDED
        return FieldKind.SCALAR

    @staticmethod
    def _describe_relationship(rel: RelationshipProperty) -> AssociationDescriptor | None:
        if rel.viewonly:
            return None
        target = entity_name(rel.mapper.class_)
        if rel.direction is RelationshipDirection.MANYTOONE:
            nullable = all(getattr(c, "nullable", True) for c in rel.local_columns)
            return AssociationDescriptor(
                name=rel.key, target=target, many=bool(rel.uselist), nullable=nullable
            )
        if rel.direction is RelationshipDirection.MANYTOMANY:
            return AssociationDescriptor(name=rel.key, target=target, many=True, nullable=True)
        return None

    # --- instances ---

    def all_instances(self, descriptor: EntityDescriptor) -> list[Any]:
        cls = descriptor.entity_class
        if cls is None:
            raise PersistenceError("Descriptor has no mapped class").with_context(
                entity=descriptor.name
            )
        try:
            mapper = inspect(cls)
        except NoInspectionAvailable as e:
            raise PersistenceError(f"{cls!r} is not mapped", cause=e).with_context(
                entity=descriptor.name
            ) from e
        try:
            rows = self.session.scalars(select(cls).order_by(*mapper.primary_key)).all()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to load instances of {descriptor.name}", cause=e
            ).with_context(entity=descriptor.name) from e
        return [row for row in rows if type(row) is cls]

    # --- reflection ---

    def reflected_namespace(self, descriptor: EntityDescriptor) -> str:
        return descriptor.namespace

    def short_name(self, descriptor: EntityDescriptor) -> str:
        return descriptor.short_name

    def get_value(self, instance: Any, name: str) -> Any:
        return getattr(instance, name)


__all__ = [
    "SqlAlchemyObjectManager",
    "create_dumper_engine",
    "entity_name",
    "load_registry",
]
