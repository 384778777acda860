"""Generator registry for looking up fixture generators by format name.

Manifesto:
    The CLI only knows a format string (``yml``, ``json``). Generators
    register themselves under one or more names so new formats plug in
    without touching the orchestrator.

Tags:
    fixture-dumper, generators, registry, lookup

Doc-Types:
    api-reference
"""

from collections.abc import Callable
from typing import TYPE_CHECKING

from fixture_dumper.core.errors import UnknownFormatError
from fixture_dumper.core.logging import get_logger

if TYPE_CHECKING:
    from fixture_dumper.generators.base import AbstractGenerator

logger = get_logger()

_registry: dict[str, type["AbstractGenerator"]] = {}


def register_generator(
    name: str, *aliases: str
) -> Callable[[type["AbstractGenerator"]], type["AbstractGenerator"]]:
    """Decorator to register a generator class under *name* and *aliases*."""

    def decorator(cls: type["AbstractGenerator"]) -> type["AbstractGenerator"]:
        for key in (name, *aliases):
            key = key.lower()
            if key in _registry and _registry[key] is not cls:
                raise ValueError(f"Format '{key}' is already registered")
            _registry[key] = cls
        logger.debug("generator_registered", name=name, aliases=list(aliases), cls=cls.__name__)
        return cls

    return decorator


def unregister_generator(name: str) -> None:
    """Remove *name* from the registry (aliases stay registered)."""
    _registry.pop(name.lower(), None)


def get_generator_class(name: str) -> type["AbstractGenerator"]:
    key = name.lower()
    if key not in _registry:
        raise UnknownFormatError(name, list_formats())
    return _registry[key]


def get_generator(name: str, **kwargs) -> "AbstractGenerator":
    """Instantiate the generator registered for format *name*."""
    return get_generator_class(name)(**kwargs)


def list_formats() -> list[str]:
    """List all registered format names."""
    return sorted(_registry.keys())


def format_names(cls: type["AbstractGenerator"]) -> list[str]:
    """Every name *cls* is registered under, in registration order."""
    return [key for key, registered in _registry.items() if registered is cls]
