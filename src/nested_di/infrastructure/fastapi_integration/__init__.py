"""
FastAPI bindings for nested-di: request scopes and ``Depends()`` factories.
"""

from .integration import (
    ScopedContainerMiddleware,
    create_fastapi_dependency,
    create_scoped_dependency,
    get_request_scope,
)

__all__ = [
    "ScopedContainerMiddleware",
    "create_fastapi_dependency",
    "create_scoped_dependency",
    "get_request_scope",
]
