"""
Entity descriptors — the immutable view of entity metadata a dump works on.

A descriptor is obtained once per run from the persistence layer and never
changes afterwards. Field and association tuples keep declaration order,
which is reproduced verbatim in the generated fixtures.

Tags:
    fixture-dumper, metadata, descriptors, entities

Doc-Types:
    api-reference
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FieldKind(str, Enum):
    """Declared shape of a field value; selects the conversion handler."""

    SCALAR = "scalar"
    SCALAR_COLLECTION = "scalar_collection"
    ASSOCIATION_COLLECTION = "association_collection"
    ASSOCIATION = "association"
    EMBEDDED = "embedded"
    ENUMERATED = "enumerated"


@dataclass(frozen=True)
class FieldDescriptor:
    """
    A plain (non-association) field.

    Attributes:
        name: Attribute name on the instance
        kind: Declared kind (refined at runtime by the navigator)
        nullable: Whether the column accepts NULL
    """

    name: str
    kind: FieldKind = FieldKind.SCALAR
    nullable: bool = True


@dataclass(frozen=True)
class AssociationDescriptor:
    """
    A link to another entity.

    Attributes:
        name: Attribute name on the instance
        target: Name of the target entity (``EntityDescriptor.name``)
        many: True for collection-valued associations
        nullable: False when the owning row cannot exist without the target
    """

    name: str
    target: str
    many: bool = False
    nullable: bool = True

    @property
    def kind(self) -> FieldKind:
        return FieldKind.ASSOCIATION_COLLECTION if self.many else FieldKind.ASSOCIATION

    @property
    def mandatory(self) -> bool:
        return not self.nullable


@dataclass(frozen=True)
class EntityDescriptor:
    """
    One entity type.

    Attributes:
        name: Fully qualified name, used as the fixture section key
        namespace: Originating namespace (module path for Python classes)
        short_name: Unqualified type name
        fields: Plain fields in declaration order
        associations: Associations in declaration order
        entity_class: The mapped class, if any (not part of equality)
    """

    name: str
    namespace: str = ""
    short_name: str = ""
    fields: tuple[FieldDescriptor, ...] = ()
    associations: tuple[AssociationDescriptor, ...] = ()
    entity_class: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "associations", tuple(self.associations))
        if not self.short_name:
            object.__setattr__(self, "short_name", self.name.rsplit(".", 1)[-1])
        if not self.namespace and "." in self.name:
            object.__setattr__(self, "namespace", self.name.rsplit(".", 1)[0])

    def mandatory_targets(self) -> list[str]:
        """Target entity names of non-nullable associations, in declaration order."""
        return [a.target for a in self.associations if a.mandatory]

    def get_association(self, name: str) -> AssociationDescriptor | None:
        for association in self.associations:
            if association.name == name:
                return association
        return None
