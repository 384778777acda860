"""
Shared pytest fixtures for fixture-dumper tests.

This module provides:
- Plain-object entity graphs (Author/Book, the Chicken/Egg cycle)
- An in-memory SQLite database populated from ``sample_models``
- Settings cache isolation

Usage:
    def test_something(library_manager, jane):
        ...
"""

import sys
from pathlib import Path

import pytest
import structlog

# Ensure fixture_dumper and the test model modules are importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from sqlalchemy.orm import Session

from fixture_dumper.converter import HandlerRegistry, Navigator, ReferenceRegistry
from fixture_dumper.core.config import clear_settings_cache
from fixture_dumper.metadata import InMemoryObjectManager
from fixture_dumper.metadata.orm import create_dumper_engine

import library
import sample_models


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark database-backed tests as integration, the rest as unit."""
    for item in items:
        if "orm" in item.nodeid or "cli" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Fresh settings for every test; no FIXTURE_DUMPER_* leakage."""
    import os

    for key in list(os.environ):
        if key.startswith("FIXTURE_DUMPER_"):
            monkeypatch.delenv(key, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_logging():
    """configure_logging() binds the current stderr; undo it after each test."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


# =============================================================================
# Plain-object graph
# =============================================================================


@pytest.fixture
def jane():
    return library.Author("Jane")


@pytest.fixture
def go_fish(jane):
    return library.Book(
        "Go Fish",
        author=jane,
        status=library.Status.PUBLISHED,
        tags=["kids", "cards"],
        meta={"pages": 32},
    )


@pytest.fixture
def library_manager(jane, go_fish):
    """Author + Book, one instance each."""
    return InMemoryObjectManager({library.AUTHOR: [jane], library.BOOK: [go_fish]})


@pytest.fixture
def hen_and_egg():
    hen = library.Chicken("Henrietta")
    egg = library.Egg("large", chicken=hen)
    hen.egg = egg
    return hen, egg


@pytest.fixture
def farm_manager(hen_and_egg):
    hen, egg = hen_and_egg
    return InMemoryObjectManager({library.CHICKEN: [hen], library.EGG: [egg]})


@pytest.fixture
def navigator():
    """Navigator over the library descriptors with default handlers."""
    return Navigator(
        HandlerRegistry.with_defaults(),
        "yml",
        ReferenceRegistry(),
        descriptors=[library.AUTHOR, library.BOOK],
    )


# =============================================================================
# SQLite database
# =============================================================================


@pytest.fixture
def engine():
    """In-memory SQLite engine with the sample schema created."""
    eng = create_dumper_engine("sqlite:///:memory:")
    sample_models.Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as sess:
        yield sess


@pytest.fixture
def populated_session(session):
    """Jane wrote two books; one of them is tagged and edited by Bob."""
    jane = sample_models.Author(name="Jane")
    bob = sample_models.Author(name="Bob")
    kids = sample_models.Tag(label="kids")
    session.add_all([jane, bob, kids])
    session.flush()
    session.add_all(
        [
            sample_models.Book(
                title="Go Fish",
                status=sample_models.Status.PUBLISHED,
                extra={"pages": 32},
                author=jane,
                editor=bob,
                tags=[kids],
            ),
            sample_models.Book(title="Snap", author=jane),
        ]
    )
    session.commit()
    return session
