from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple, Type, TypeVar

from nested_di.domain.enums import Lifetime

if TYPE_CHECKING:
    from nested_di.domain.models import RegistrationEntry

T = TypeVar("T")


class IDisposable(ABC):
    """Capability of releasing held resources through a single idempotent ``dispose`` call.

    Any object exposing a callable ``dispose`` attribute is treated as disposable,
    whether or not it inherits from this class.
    """

    @abstractmethod
    def dispose(self) -> None:
        """Release every resource held by this object."""

    @classmethod
    def __subclasshook__(cls, subclass: type) -> Any:
        if cls is IDisposable:
            if callable(getattr(subclass, "dispose", None)):
                return True
        return NotImplemented


def is_disposable(instance: Any) -> bool:
    """Tell whether an object exposes a callable ``dispose``, on its class or on itself."""
    return callable(getattr(instance, "dispose", None))


class IContainer(ABC):
    """Abstract interface for dependency injection container operations."""

    @abstractmethod
    def register(
        self,
        dependency_type: Any,
        factory: Callable[["IContainer"], Any],
        lifetime: Lifetime = Lifetime.TRANSIENT,
        key: Optional[str] = None,
    ) -> None:
        """Register a factory for a type identifier.

        Args:
            dependency_type: The type identifier to register.
            factory: Callable receiving the requesting container and returning an instance.
            lifetime: Caching policy of the produced instances.
            key: Optional discriminator for multiple registrations of one type.
        """

    @abstractmethod
    def register_instance(self, dependency_type: Any, instance: Any, key: Optional[str] = None) -> None:
        """Register an existing object as a singleton.

        Args:
            dependency_type: The type identifier to register.
            instance: The object returned by every resolution.
            key: Optional registration key.
        """

    @abstractmethod
    def resolve(self, dependency_type: Type[T], key: Optional[str] = None) -> T:
        """Resolve and return an instance of the requested type.

        Args:
            dependency_type: The type to resolve.
            key: Optional registration key.
        """

    @abstractmethod
    def resolve_all(self, dependency_type: Type[T]) -> List[T]:
        """Resolve every registration of a type across the container hierarchy.

        Args:
            dependency_type: The type to resolve.
        """

    @abstractmethod
    def is_registered(self, dependency_type: Any, key: Optional[str] = None) -> bool:
        """Tell whether a registration is reachable from this container."""

    @abstractmethod
    def create_scope(self) -> Any:
        """Create and return a scope bounding the lifetime of scoped instances."""

    @abstractmethod
    def add_decorator(self, dependency_type: Type[T], decorator: Callable[[T], T]) -> None:
        """Append a post-construction transform for a type."""

    @abstractmethod
    def validate(self) -> None:
        """Resolve every local registration, raising an aggregate error on failure."""

    @abstractmethod
    def dispose(self) -> None:
        """Tear the container down. Idempotent."""


class IModule(ABC):
    """A group of related registrations applied to a container by ``add_module``."""

    @abstractmethod
    def configure(self, container: IContainer) -> None:
        """Register this module's dependencies on the given container.

        Args:
            container: The container to configure.
        """


class IResolver(ABC):
    """Abstract interface for dependency resolution operations."""

    @abstractmethod
    def resolve(self, container: Any, dependency_type: Any, key: Optional[str] = None) -> Any:
        """Resolve a single instance on behalf of the requesting container.

        Raises:
            RegistrationNotFoundError: If no registration is reachable.
            CircularDependencyError: If the type is already being resolved.
            UnresolvableError: If a factory or decorator fails.
        """

    @abstractmethod
    def resolve_all(self, container: Any, dependency_type: Any) -> List[Any]:
        """Resolve every registration of a type reachable from the container."""

    @abstractmethod
    def find_registration(
        self, container: Any, dependency_type: Any, key: Optional[str] = None
    ) -> Tuple["RegistrationEntry", Any]:
        """Locate the registration serving a request and the container owning it."""


class ILifetimeManager(ABC):
    """Abstract interface for managing dependency lifetimes."""

    @abstractmethod
    def get_or_create(self, entry: "RegistrationEntry", factory: Callable[[], Any]) -> Any:
        """Get existing instance or create a new one based on lifetime.

        Args:
            entry: The registration entry being resolved.
            factory: A callable to create a new instance if needed.
        """

    @abstractmethod
    def scoped_instances(self) -> List[Any]:
        """Return the instances held by the scoped-instance store."""

    @abstractmethod
    def clear_scoped_cache(self) -> None:
        """Clear only the scoped instances cache."""

