"""
nested-di: Dependency Injection runtime with nested containers, scopes and decorators.

Public API exports for the nested-di package.
"""

# Application exports
from nested_di.application.builder import ContainerBuilder, RegistrationBuilder
from nested_di.application.container import DIContainer
from nested_di.application.scope import ContainerScope

# Domain exports
from nested_di.domain.enums import Lifetime
from nested_di.domain.exceptions import (
    CircularDependencyError,
    ContainerDisposedError,
    ContainerValidationError,
    DIException,
    DuplicateRegistrationError,
    RegistrationNotFoundError,
    UnresolvableError,
)
from nested_di.domain.interfaces import IDisposable, IModule, is_disposable
from nested_di.domain.models import ContainerOptions, Registration

__version__ = "0.1.0"

__all__ = [
    # Container
    "DIContainer",
    "ContainerScope",
    "ContainerBuilder",
    "RegistrationBuilder",
    # Configuration
    "ContainerOptions",
    "Registration",
    # Enums
    "Lifetime",
    # Interfaces
    "IDisposable",
    "is_disposable",
    "IModule",
    # Exceptions
    "DIException",
    "CircularDependencyError",
    "ContainerDisposedError",
    "ContainerValidationError",
    "DuplicateRegistrationError",
    "RegistrationNotFoundError",
    "UnresolvableError",
]
