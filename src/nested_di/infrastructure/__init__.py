"""
Infrastructure layer for nested-di.

Adapters binding the container hierarchy to outside frameworks: per-request
scopes for FastAPI/Starlette applications and override-friendly containers
for test suites.
"""

from . import fastapi_integration, testing
from .fastapi_integration import (
    ScopedContainerMiddleware,
    create_fastapi_dependency,
    create_scoped_dependency,
    get_request_scope,
)
from .testing import MockScope, TestContainer, create_mock_container

__all__ = [
    "fastapi_integration",
    "testing",
    "ScopedContainerMiddleware",
    "create_fastapi_dependency",
    "create_scoped_dependency",
    "get_request_scope",
    "TestContainer",
    "create_mock_container",
    "MockScope",
]
