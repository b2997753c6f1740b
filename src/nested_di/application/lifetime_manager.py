from typing import Any, Callable, Dict, List, Optional, Tuple

from nested_di.domain import ContainerDisposedError, ILifetimeManager, Lifetime, RegistrationEntry


class LifetimeManager(ILifetimeManager):
    """Manages instance lifetimes for singleton, transient, and scoped dependencies.

    Singletons are cached on their registration entry, so every container that
    reaches the entry shares one instance. Scoped instances live in this
    manager's store; each container owns its own manager, which makes the store
    belong to the resolving container.

    Attributes:
        _scoped_cache: Scoped instances keyed by (type identifier, key).
    """

    def __init__(self) -> None:
        """Initialize the lifetime manager with an empty scoped store."""
        self._scoped_cache: Dict[Tuple[Any, Optional[str]], Any] = {}

    def get_or_create(self, entry: RegistrationEntry, factory: Callable[[], Any]) -> Any:
        """Get existing instance or create new one based on lifetime.

        Args:
            entry: Registration entry containing lifetime info and the singleton cache.
            factory: Function to create new instance if needed.

        Returns:
            Instance according to lifetime rules:
            - Singleton: Returns the entry's cached instance or creates and caches a new one
            - Transient: Always creates new instance
            - Scoped: Returns the instance cached in this store or creates and stores a new one

        Raises:
            ContainerDisposedError: If the entry has been disposed.
        """
        if entry.disposed:
            raise ContainerDisposedError("Registration has been disposed")

        lifetime = entry.lifetime

        if lifetime == Lifetime.SINGLETON:
            if not entry.has_instance:
                entry.set_instance(factory())
            return entry.cached_instance

        if lifetime == Lifetime.SCOPED:
            cache_key = (entry.dependency_type, entry.key)
            if cache_key not in self._scoped_cache:
                self._scoped_cache[cache_key] = factory()
            return self._scoped_cache[cache_key]

        # Lifetime.TRANSIENT
        return factory()

    def get_scoped_instance(self, dependency_type: Any, key: Optional[str] = None) -> Any:
        """Return the stored scoped instance for the pair, or None."""
        return self._scoped_cache.get((dependency_type, key))

    def scoped_instances(self) -> List[Any]:
        """Return the scoped instances in creation order."""
        return list(self._scoped_cache.values())

    def clear_scoped_cache(self) -> None:
        """Clear only the scoped instance cache.

        Useful when ending a scope (e.g., end of HTTP request).
        """
        self._scoped_cache.clear()
