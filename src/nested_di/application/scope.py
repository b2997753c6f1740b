"""Application layer - Scope handle over a child container."""

from typing import TYPE_CHECKING, List, Optional, Type, TypeVar

from nested_di.domain import ContainerDisposedError

if TYPE_CHECKING:
    from nested_di.application.container import DIContainer

T = TypeVar("T")


class ContainerScope:
    """Thin handle bounding the lifetime of scoped instances.

    Wraps a child container and exposes its resolve and dispose surface.
    Registrations that should only exist inside the scope can be added through
    ``scope.container``.

    Example:
        >>> with container.create_scope() as scope:
        ...     ctx = scope.resolve(RequestContext)
        ... # Scoped instances are disposed here
    """

    def __init__(self, container: "DIContainer") -> None:
        self._container = container
        self._is_disposed = False

    @property
    def container(self) -> "DIContainer":
        """The child container backing this scope."""
        self._check_disposed()
        return self._container

    @property
    def is_disposed(self) -> bool:
        return self._is_disposed

    def resolve(self, dependency_type: Type[T], key: Optional[str] = None) -> T:
        self._check_disposed()
        return self._container.resolve(dependency_type, key)

    def resolve_all(self, dependency_type: Type[T]) -> List[T]:
        self._check_disposed()
        return self._container.resolve_all(dependency_type)

    def is_registered(self, dependency_type: Type[T], key: Optional[str] = None) -> bool:
        self._check_disposed()
        return self._container.is_registered(dependency_type, key)

    def create_scope(self) -> "ContainerScope":
        """Create a nested scope whose container's parent is this scope's container."""
        self._check_disposed()
        return self._container.create_scope()

    def dispose(self) -> None:
        """Dispose the backing container. Repeated calls are no-ops."""
        if self._is_disposed:
            return
        self._container.dispose()
        self._is_disposed = True

    def _check_disposed(self) -> None:
        if self._is_disposed:
            raise ContainerDisposedError("Scope has been disposed")

    def __enter__(self) -> "ContainerScope":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        self.dispose()
        return False
