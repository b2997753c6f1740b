"""Unit tests for domain enums."""

import pytest

from nested_di.domain.enums import Lifetime


class TestLifetimeEnum:
    """Test cases for the Lifetime enum."""

    def test_member_values(self):
        """Test that every lifetime has its lowercase string value."""
        assert Lifetime.SINGLETON.value == "singleton"
        assert Lifetime.TRANSIENT.value == "transient"
        assert Lifetime.SCOPED.value == "scoped"

    def test_lifetime_from_value(self):
        """Test that lifetime can be created from string value."""
        assert Lifetime("singleton") == Lifetime.SINGLETON
        assert Lifetime("transient") == Lifetime.TRANSIENT
        assert Lifetime("scoped") == Lifetime.SCOPED

    def test_invalid_lifetime_value_raises_error(self):
        """Test that invalid lifetime value raises ValueError."""
        with pytest.raises(ValueError):
            Lifetime("per-request")

    def test_lifetime_enum_members(self):
        """Test that exactly the three lifetimes exist."""
        assert {member.name for member in Lifetime} == {"SINGLETON", "TRANSIENT", "SCOPED"}

    def test_lifetime_string_representation(self):
        """Test that str() returns the plain value."""
        assert str(Lifetime.SCOPED) == "scoped"

    def test_lifetime_compares_to_string(self):
        """Test that lifetimes compare equal to their string values."""
        assert Lifetime.SINGLETON == "singleton"
