"""
Tests for fixture_dumper.converter.references.

Tests cover:
- Stable names per instance identity
- is_new semantics around the allocating resolve()
- Per-type counters and custom model names
- lookup() never allocates
"""

from fixture_dumper.converter import ReferenceRegistry

from library import Author, Book


class TestResolve:
    """Tests for ReferenceRegistry.resolve."""

    def test_same_identity_same_name(self):
        registry = ReferenceRegistry()
        jane = Author("Jane")

        first = registry.resolve(jane)
        second = registry.resolve(jane)

        assert first == second == "author0"

    def test_second_resolve_is_not_new(self):
        """The allocating resolve() is new, the next one is not."""
        registry = ReferenceRegistry()
        jane = Author("Jane")

        assert registry.is_new(jane)
        registry.resolve(jane)
        assert registry.is_new(jane)
        registry.resolve(jane)
        assert not registry.is_new(jane)

    def test_identity_not_equality(self):
        registry = ReferenceRegistry()
        assert registry.resolve(Author("Jane")) != registry.resolve(Author("Jane"))

    def test_counters_per_type(self):
        registry = ReferenceRegistry()
        names = [
            registry.resolve(Author("a")),
            registry.resolve(Book("x")),
            registry.resolve(Author("b")),
        ]
        assert names == ["author0", "book0", "author1"]

    def test_custom_model_name_is_lowercased(self):
        registry = ReferenceRegistry(model_name=lambda obj: "Writer")
        assert registry.resolve(Author("Jane")) == "writer0"


class TestLookup:
    """Tests for lookup, membership and names."""

    def test_lookup_does_not_allocate(self):
        registry = ReferenceRegistry()
        jane = Author("Jane")

        assert registry.lookup(jane) is None
        assert jane not in registry
        assert len(registry) == 0

        registry.resolve(jane)
        assert registry.lookup(jane) == "author0"
        assert jane in registry

    def test_names_in_allocation_order(self):
        registry = ReferenceRegistry()
        for author in (Author("a"), Author("b")):
            registry.resolve(author)
        registry.resolve(Book("x"))
        assert registry.names() == ["author0", "author1", "book0"]

    def test_names_are_unique_within_a_run(self):
        registry = ReferenceRegistry()
        authors = [Author(str(i)) for i in range(25)]
        names = [registry.resolve(a) for a in authors]
        assert len(set(names)) == 25

    def test_prefix_ending_in_digit_does_not_collide(self):
        """``item`` #10 and ``item1`` #0 would both spell ``item10``."""

        class Item:
            pass

        class Item1:
            pass

        registry = ReferenceRegistry()
        items = [registry.resolve(Item()) for _ in range(11)]
        other = registry.resolve(Item1())

        assert items[10] == "item10"
        assert other not in items
        assert other == "item11"

    def test_collision_skipped_in_either_order(self):
        class Item:
            pass

        class Item1:
            pass

        registry = ReferenceRegistry()
        first = registry.resolve(Item1())
        items = [registry.resolve(Item()) for _ in range(12)]

        assert first == "item10"
        assert first not in items
        assert items[-2:] == ["item11", "item12"]
        assert len(set(registry.names())) == 13
