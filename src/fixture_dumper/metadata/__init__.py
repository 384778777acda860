"""Entity metadata: descriptor types and persistence adapters."""

from fixture_dumper.metadata.descriptors import (
    AssociationDescriptor,
    EntityDescriptor,
    FieldDescriptor,
    FieldKind,
)
from fixture_dumper.metadata.protocol import InMemoryObjectManager, ObjectManager

__all__ = [
    "AssociationDescriptor",
    "EntityDescriptor",
    "FieldDescriptor",
    "FieldKind",
    "InMemoryObjectManager",
    "ObjectManager",
]
