"""
Reference registry — run-scoped symbolic names for emitted instances.

Manifesto:
    Every instance gets exactly one name per run, the first time anything
    asks for it. All later occurrences, in any fixture file, point at that
    name instead of repeating the instance. This is what makes cycles in
    the object graph terminate and keeps fixtures free of duplicates.

Architecture:
    ::

        resolve(jane)   ──►  new?  ──yes──►  "author" + counter["author"]++
                              │                     │
                              no                    ▼
                              │              _names[id(jane)] = "author0"
                              ▼
                        "author0"  (is_new(jane) == False from now on)

Identity, not equality: two equal-but-distinct objects get two names. The
registry holds a strong reference to every resolved instance, so ``id()``
values cannot be recycled while a run is in progress.

The registry is not thread-safe and must not be shared between runs.

Tags:
    fixture-dumper, references, identity, cycles

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any

from fixture_dumper.core.logging import get_logger

logger = get_logger(__name__)


def _default_model_name(instance: Any) -> str:
    return type(instance).__name__.lower()


class ReferenceRegistry:
    """
    Tracks which instances were named during the current run.

    Example:
        registry = ReferenceRegistry()
        registry.resolve(jane)    # "author0"
        registry.is_new(jane)     # True
        registry.resolve(jane)    # "author0"
        registry.is_new(jane)     # False
    """

    def __init__(self, model_name: Callable[[Any], str] | None = None):
        self._model_name = model_name or _default_model_name
        self._names: dict[int, str] = {}
        self._instances: dict[int, Any] = {}
        self._counters: dict[str, int] = defaultdict(int)
        self._fresh: set[int] = set()
        self._taken: set[str] = set()

    def resolve(self, instance: Any) -> str:
        """Return the name of *instance*, allocating one on first sight."""
        key = id(instance)
        existing = self._names.get(key)
        if existing is not None:
            self._fresh.discard(key)
            return existing

        prefix = self._model_name(instance).lower()
        # "item1" + "0" and "item" + "10" spell the same name
        name = f"{prefix}{self._counters[prefix]}"
        while name in self._taken:
            self._counters[prefix] += 1
            name = f"{prefix}{self._counters[prefix]}"
        self._counters[prefix] += 1
        self._taken.add(name)
        self._names[key] = name
        self._instances[key] = instance
        self._fresh.add(key)
        logger.debug("references.allocated", name=name)
        return name

    def is_new(self, instance: Any) -> bool:
        """
        True if *instance* has not been named yet, or if the last
        ``resolve()`` of it was the one that allocated its name.
        """
        key = id(instance)
        return key not in self._names or key in self._fresh

    def lookup(self, instance: Any) -> str | None:
        """Name of *instance* if it was resolved before, without allocating."""
        return self._names.get(id(instance))

    def __contains__(self, instance: Any) -> bool:
        return id(instance) in self._names

    def __len__(self) -> int:
        return len(self._names)

    def names(self) -> list[str]:
        """All allocated names, in allocation order."""
        return list(self._names.values())
