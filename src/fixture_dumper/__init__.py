"""
fixture-dumper - Dump persisted entity graphs into editable fixture files.

Layers:
- fixture_dumper.core: errors, logging, settings
- fixture_dumper.metadata: entity descriptors and persistence adapters
- fixture_dumper.converter: reference registry, handlers, navigator, visitors
- fixture_dumper.generators: per-format generators (yml, json)
- fixture_dumper.ordering / fixture_dumper.dumper: dump order and orchestration
"""

__version__ = "0.4.0"

from fixture_dumper.dumper import Dumper, DumpMode, RenderedFixture
from fixture_dumper.filtering import EntityFilter
from fixture_dumper.ordering import DumpOrderResolver, DumpPlan

__all__ = [
    "Dumper",
    "DumpMode",
    "DumpOrderResolver",
    "DumpPlan",
    "EntityFilter",
    "RenderedFixture",
    "__version__",
]
