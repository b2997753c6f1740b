"""Unit tests for Registry."""

import pytest

from nested_di.application.registry import Registry
from nested_di.domain import (
    DuplicateRegistrationError,
    Lifetime,
    Registration,
    RegistrationEntry,
    RegistrationNotFoundError,
)


class Logger:
    pass


class Cache:
    pass


def make_entry(dependency_type, key=None, lifetime=Lifetime.TRANSIENT):
    registration = Registration(
        dependency_type=dependency_type,
        factory=lambda c: dependency_type(),
        lifetime=lifetime,
        key=key,
    )
    return RegistrationEntry(registration=registration)


class TestRegistryAdd:
    """Test cases for adding entries."""

    def test_add_and_get(self):
        registry = Registry()
        entry = make_entry(Logger)
        registry.add(entry)

        assert registry.get(Logger) is entry
        assert len(registry) == 1

    def test_duplicate_default_rejected(self):
        registry = Registry()
        registry.add(make_entry(Logger))

        with pytest.raises(DuplicateRegistrationError) as exc_info:
            registry.add(make_entry(Logger))

        assert exc_info.value.dependency_type is Logger
        assert exc_info.value.key is None

    def test_duplicate_key_rejected(self):
        registry = Registry()
        registry.add(make_entry(Logger, "file"))

        with pytest.raises(DuplicateRegistrationError):
            registry.add(make_entry(Logger, "file"))

    def test_empty_key_is_distinct_from_default(self):
        """Test that '' and None are separate registrations."""
        registry = Registry()
        default = make_entry(Logger)
        empty = make_entry(Logger, "")
        registry.add(default)
        registry.add(empty)

        assert registry.get(Logger) is default
        assert registry.get(Logger, "") is empty


class TestRegistryLookup:
    """Test cases for lookups."""

    def test_get_missing_raises(self):
        registry = Registry()

        with pytest.raises(RegistrationNotFoundError):
            registry.get(Logger)

    def test_find_missing_returns_none(self):
        registry = Registry()
        registry.add(make_entry(Logger, "file"))

        assert registry.find(Logger) is None
        assert registry.find(Cache, "file") is None

    def test_get_does_not_fall_back_to_default(self):
        """Test that the registry itself only does exact matches."""
        registry = Registry()
        registry.add(make_entry(Logger))

        with pytest.raises(RegistrationNotFoundError):
            registry.get(Logger, "file")

    def test_get_all_in_insertion_order(self):
        registry = Registry()
        first = make_entry(Logger, "console")
        second = make_entry(Logger)
        third = make_entry(Logger, "file")
        for entry in (first, second, third):
            registry.add(entry)
        registry.add(make_entry(Cache))

        assert registry.get_all(Logger) == [first, second, third]

    def test_get_all_unknown_type_is_empty(self):
        assert Registry().get_all(Logger) == []

    def test_contains(self):
        registry = Registry()
        registry.add(make_entry(Logger, "file"))

        assert (Logger, "file") in registry
        assert (Logger, None) not in registry


class TestRegistryMutation:
    """Test cases for removal, iteration and clearing."""

    def test_remove(self):
        registry = Registry()
        entry = make_entry(Logger)
        registry.add(entry)

        assert registry.remove(Logger) is entry
        assert len(registry) == 0
        assert registry.get_all(Logger) == []

    def test_remove_missing_raises(self):
        with pytest.raises(RegistrationNotFoundError):
            Registry().remove(Logger, "file")

    def test_entries_yields_triples(self):
        registry = Registry()
        logger_entry = make_entry(Logger, "file")
        cache_entry = make_entry(Cache)
        registry.add(logger_entry)
        registry.add(cache_entry)

        assert list(registry.entries()) == [(Logger, "file", logger_entry), (Cache, None, cache_entry)]

    def test_clear(self):
        registry = Registry()
        registry.add(make_entry(Logger))
        registry.clear()

        assert len(registry) == 0
