from typing import TYPE_CHECKING, Any, List, Optional, Tuple

import structlog

from nested_di.domain import (
    DIException,
    IResolver,
    Lifetime,
    RegistrationEntry,
    RegistrationNotFoundError,
    UnresolvableError,
)
from nested_di.domain.exceptions import describe_type

if TYPE_CHECKING:
    from nested_di.application.container import DIContainer

logger = structlog.get_logger(__name__)


class DependencyResolver(IResolver):
    """Resolves dependencies by walking the container hierarchy.

    The resolver holds no state of its own. Everything it mutates belongs to a
    container: the in-flight stack of the requesting container, the scoped store
    of the requesting container, the singleton cache on the registration entry
    and the disposal tracker of whichever container is responsible for teardown.
    """

    def resolve(self, container: "DIContainer", dependency_type: Any, key: Optional[str] = None) -> Any:
        """Resolve one instance on behalf of ``container``.

        Args:
            container: The requesting container. Factories receive it, so a
                child's registrations override what its parents provide.
            dependency_type: The type identifier to resolve.
            key: Optional registration key.

        Returns:
            The decorated instance.

        Raises:
            CircularDependencyError: If the type is already being resolved on this call chain.
            RegistrationNotFoundError: If no registration is reachable.
            ContainerDisposedError: If the serving registration has been disposed.
            UnresolvableError: If a factory or decorator raised any other exception.

        Example:
            >>> container.register(Database, lambda c: Database("conn-string-A"), Lifetime.SINGLETON)
            >>> container.register(Repository, lambda c: Repository(c.resolve(Database)))
            >>> resolver.resolve(container, Repository)
        """
        logger.debug("Resolving dependency", dependency_type=describe_type(dependency_type), key=key)

        detector = container.circular_detector
        # Raises before pushing, so the stack stays balanced
        detector.push(dependency_type)
        try:
            entry, owner = self.find_registration(container, dependency_type, key)
            return self._instantiate(container, owner, entry, key)
        finally:
            detector.pop()

    def resolve_all(self, container: "DIContainer", dependency_type: Any) -> List[Any]:
        """Resolve every registration of a type reachable from ``container``.

        Registrations of the container come first in insertion order, followed by
        those of each ancestor, nearest first. Each one goes through the same cycle
        check, lifetime handling, decoration and tracking as ``resolve``.

        Returns:
            The resolved instances; an empty list when nothing is registered.
        """
        logger.debug("Resolving all dependencies", dependency_type=describe_type(dependency_type))

        instances = []
        detector = container.circular_detector
        for entry, owner in self.find_all_registrations(container, dependency_type):
            detector.push(dependency_type)
            try:
                instances.append(self._instantiate(container, owner, entry, entry.key))
            finally:
                detector.pop()
        return instances

    def find_registration(
        self, container: "DIContainer", dependency_type: Any, key: Optional[str] = None
    ) -> Tuple[RegistrationEntry, "DIContainer"]:
        """Locate the entry serving a request and the container that owns it.

        Search order:
        1. Exact (type, key) match in ``container``
        2. When a key was given, the default registration of the type in ``container``
        3. The same search in the parent container, with the original key

        Raises:
            RegistrationNotFoundError: If no container in the chain has a match.
        """
        current: Optional["DIContainer"] = container
        while current is not None:
            registry = current.registry
            entry = registry.find(dependency_type, key)
            if entry is None and key is not None:
                entry = registry.find(dependency_type, None)
            if entry is not None:
                return entry, current
            current = current.parent

        raise RegistrationNotFoundError(dependency_type, key)

    def find_all_registrations(
        self, container: "DIContainer", dependency_type: Any
    ) -> List[Tuple[RegistrationEntry, "DIContainer"]]:
        """Collect every entry of a type from ``container`` and its ancestors, nearest first."""
        result = []
        current: Optional["DIContainer"] = container
        while current is not None:
            result.extend((entry, current) for entry in current.registry.get_all(dependency_type))
            current = current.parent
        return result

    def _instantiate(
        self,
        container: "DIContainer",
        owner: "DIContainer",
        entry: RegistrationEntry,
        key: Optional[str],
    ) -> Any:
        """Create or fetch the instance, decorate it and track it for teardown."""
        dependency_type = entry.dependency_type
        try:
            instance = container.lifetime_manager.get_or_create(
                entry,
                lambda: entry.registration.factory(container),
            )
            instance = self._apply_decorators(container, dependency_type, instance)
        except DIException:
            raise
        except Exception as e:
            raise UnresolvableError(dependency_type, f"Failed to create instance: {e}", key=key) from e

        entry.resolution_count += 1
        self._track_if_needed(container, owner, entry, instance)
        return instance

    def _apply_decorators(self, container: "DIContainer", dependency_type: Any, instance: Any) -> Any:
        """Apply the requesting container's decorators for the type in registration order."""
        for decorator in container.get_decorators(dependency_type):
            instance = decorator(instance)
        return instance

    def _track_if_needed(
        self,
        container: "DIContainer",
        owner: "DIContainer",
        entry: RegistrationEntry,
        instance: Any,
    ) -> None:
        """Track non-transient disposable instances.

        The cached singleton itself is tracked by the container owning the
        registration, so disposing a scope never tears down an instance shared
        with its parent. Scoped instances and anything a decorator returned
        belong to the resolving container.
        """
        if entry.lifetime == Lifetime.TRANSIENT:
            return
        shared = entry.lifetime == Lifetime.SINGLETON and entry.has_instance and instance is entry.cached_instance
        tracker_owner = owner if shared else container
        tracker_owner.disposal_tracker.track(instance)
