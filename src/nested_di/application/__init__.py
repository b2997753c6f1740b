"""
Application layer - Use cases and orchestration.

This layer contains the use cases that orchestrate domain objects.
It depends only on the Domain layer.
"""

from .builder import ContainerBuilder, RegistrationBuilder
from .circular_detector import CircularDependencyDetector
from .container import DIContainer
from .disposal_tracker import DisposalTracker
from .lifetime_manager import LifetimeManager
from .registry import Registry
from .resolver import DependencyResolver
from .scope import ContainerScope
from .validator import ContainerValidator

__all__ = [
    "DIContainer",
    "ContainerScope",
    "ContainerBuilder",
    "RegistrationBuilder",
    "DependencyResolver",
    "LifetimeManager",
    "CircularDependencyDetector",
    "DisposalTracker",
    "Registry",
    "ContainerValidator",
]
