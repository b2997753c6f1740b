"""
Domain layer - Core business logic and models.

This layer contains the fundamental rules and models for dependency injection.
It has no dependencies on other layers.
"""

from .enums import Lifetime
from .exceptions import (
    CircularDependencyError,
    ContainerDisposedError,
    ContainerValidationError,
    DIException,
    DuplicateRegistrationError,
    RegistrationNotFoundError,
    UnresolvableError,
)
from .interfaces import IContainer, IDisposable, ILifetimeManager, IModule, IResolver, is_disposable
from .models import (
    ContainerOptions,
    Registration,
    RegistrationEntry,
    ResolutionContext,
    ValidationFailure,
)

__all__ = [
    # Enums
    "Lifetime",
    # Exceptions
    "DIException",
    "CircularDependencyError",
    "ContainerDisposedError",
    "ContainerValidationError",
    "DuplicateRegistrationError",
    "RegistrationNotFoundError",
    "UnresolvableError",
    # Interfaces
    "IContainer",
    "IDisposable",
    "is_disposable",
    "IModule",
    "IResolver",
    "ILifetimeManager",
    # Models
    "ContainerOptions",
    "Registration",
    "RegistrationEntry",
    "ResolutionContext",
    "ValidationFailure",
]
