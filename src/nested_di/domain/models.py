from typing import Any, Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from nested_di.domain.enums import Lifetime
from nested_di.domain.exceptions import CircularDependencyError
from nested_di.domain.interfaces import IContainer, is_disposable


class ContainerOptions(BaseModel):
    """Configuration shared by a container and every container created below it.

    Attributes:
        thread_safe: Serialize registration, resolution and disposal on a
            hierarchy-wide re-entrant lock.
        validate_on_build: Run validation when ``ContainerBuilder.build`` is called.
    """

    model_config = ConfigDict(frozen=True)

    thread_safe: bool = Field(default=True, description="Guard container operations with a re-entrant lock.")
    validate_on_build: bool = Field(default=True, description="Validate registrations when a builder finishes.")


class Registration(BaseModel):
    """Value object representing a dependency registration.

    Attributes:
        dependency_type: The type identifier being registered.
        factory: Factory function that receives the requesting container and returns an instance.
        lifetime: How long the instance should live.
        key: Optional discriminator; None denotes the default registration.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    dependency_type: Any = Field(..., description="The type identifier to be registered.")
    factory: Callable[[IContainer], Any] = Field(..., description="The factory creating an instance.")
    lifetime: Lifetime = Field(default=Lifetime.TRANSIENT, description="The lifetime of the registered dependency.")
    key: Optional[str] = Field(default=None, description="Optional registration key.")


class RegistrationEntry(BaseModel):
    """Registry record owning a registration and, for singletons, its cached instance.

    Attributes:
        registration: The original registration configuration.
        cached_instance: Cached instance for Singleton lifetime.
        has_instance: Whether ``cached_instance`` holds a value (None is a valid instance).
        disposed: Set once the owning container tears the entry down.
        resolution_count: Number of times this entry has been resolved.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    registration: Registration = Field(..., description="The registration details of the dependency.")
    cached_instance: Optional[Any] = Field(default=None, description="Cached instance for Singleton lifetime.")
    has_instance: bool = Field(default=False, description="Whether an instance has been cached.")
    disposed: bool = Field(default=False, description="Whether this entry has been disposed.")
    resolution_count: int = Field(default=0, description="Number of times this entry has been resolved.")

    @property
    def dependency_type(self) -> Any:
        return self.registration.dependency_type

    @property
    def key(self) -> Optional[str]:
        return self.registration.key

    @property
    def lifetime(self) -> Lifetime:
        return self.registration.lifetime

    def set_instance(self, instance: Any) -> None:
        """Cache an instance on the entry, overwriting any previous one."""
        self.cached_instance = instance
        self.has_instance = True

    def reset(self) -> None:
        """Drop the cached instance without disposing it."""
        self.cached_instance = None
        self.has_instance = False

    def dispose(self) -> None:
        """Mark the entry disposed and dispose its cached instance if it is disposable.

        The entry is settled before the instance's ``dispose`` runs, so a failing
        instance still leaves the entry disposed. Repeated calls are no-ops.
        """
        if self.disposed:
            return
        instance = self.cached_instance if self.has_instance else None
        self.reset()
        self.disposed = True
        if is_disposable(instance):
            instance.dispose()


class ValidationFailure(BaseModel):
    """One failing registration reported by container validation."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    dependency_type: Any
    key: Optional[str] = None
    error: Exception


class ResolutionContext(BaseModel):
    """Tracks the current dependency resolution stack.

    Used for circular dependency detection. The stack is ordered oldest
    first and is shared by every nested resolution of one call chain.

    Attributes:
        stack: List of type identifiers currently being resolved.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    stack: List[Any] = Field(
        default_factory=list,
        description="Stack of type identifiers currently being resolved.",
    )

    @property
    def chain(self) -> List[Any]:
        return list(self.stack)

    def contains(self, dependency_type: Any) -> bool:
        return dependency_type in self.stack

    def push(self, dependency_type: Any) -> None:
        """Add a type identifier to the resolution stack.

        Args:
            dependency_type: The type being resolved.

        Raises:
            CircularDependencyError: If the type is already in the stack. The
                carried chain is the whole stack followed by the offender.
        """
        if dependency_type in self.stack:
            raise CircularDependencyError(self.stack + [dependency_type])
        self.stack.append(dependency_type)

    def pop(self) -> None:
        """Remove the last (most recent) type identifier from the stack."""
        if self.stack:
            self.stack.pop()

    def clear(self) -> None:
        """Clear the entire resolution stack."""
        self.stack.clear()
