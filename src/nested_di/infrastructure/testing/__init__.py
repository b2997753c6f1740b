"""
Testing utilities module.

Provides helpers and utilities for testing applications using nested-di.
"""

from .utilities import MockScope, TestContainer, create_mock_container

__all__ = [
    "TestContainer",
    "create_mock_container",
    "MockScope",
]
