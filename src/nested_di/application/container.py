import threading
from contextlib import nullcontext
from typing import Any, Callable, ContextManager, Dict, List, Optional, Set, Type, TypeVar

import structlog

from nested_di.application.circular_detector import CircularDependencyDetector
from nested_di.application.disposal_tracker import DisposalTracker, dispose_quietly
from nested_di.application.lifetime_manager import LifetimeManager
from nested_di.application.registry import Registry
from nested_di.application.resolver import DependencyResolver
from nested_di.application.scope import ContainerScope
from nested_di.application.validator import ContainerValidator
from nested_di.domain import (
    ContainerDisposedError,
    ContainerOptions,
    IContainer,
    IModule,
    Lifetime,
    Registration,
    RegistrationEntry,
    RegistrationNotFoundError,
    is_disposable,
)
from nested_di.domain.exceptions import describe_type

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class DIContainer(IContainer):
    """Main dependency injection container.

    Couples a registry, a resolution stack, a scoped-instance store, a disposal
    tracker and decorators, with an optional parent used only for upward lookup.
    The parent is observed, never owned: disposing a parent does not dispose its
    children, and children must be disposed by whoever created them.

    Attributes:
        _parent: Parent container consulted when a registration is missing here.
        _options: Configuration shared with every descendant.
        _lock: Re-entrant lock shared by the whole hierarchy.
        _registry: Registrations owned by this container.
        _resolver: Component walking the hierarchy to resolve dependencies.
        _lifetime_manager: Component managing instance lifetimes and the scoped store.
        _circular_detector: Resolution stack shared by the whole hierarchy.
        _disposal_tracker: Disposable instances released on teardown.
        _decorators: Post-construction transforms per type, in registration order.
    """

    def __init__(self, parent: Optional["DIContainer"] = None, options: Optional[ContainerOptions] = None) -> None:
        """Initialize the container.

        Args:
            parent: Optional parent container. Children inherit its options, lock and
                resolution stack.
            options: Container configuration; ignored for children, which use the parent's.
        """
        self._parent = parent
        if parent is not None:
            self._options = parent.options
            self._lock: ContextManager[Any] = parent._lock
            self._circular_detector = parent.circular_detector
        else:
            self._options = options or ContainerOptions()
            self._lock = threading.RLock() if self._options.thread_safe else nullcontext()
            self._circular_detector = CircularDependencyDetector()

        self._registry = Registry()
        self._resolver = DependencyResolver()
        self._lifetime_manager = LifetimeManager()
        self._disposal_tracker = DisposalTracker()
        self._decorators: Dict[Any, List[Callable[[Any], Any]]] = {}
        self._is_disposed = False

    @property
    def parent(self) -> Optional["DIContainer"]:
        return self._parent

    @property
    def options(self) -> ContainerOptions:
        return self._options

    @property
    def is_disposed(self) -> bool:
        return self._is_disposed

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def resolver(self) -> DependencyResolver:
        return self._resolver

    @property
    def lifetime_manager(self) -> LifetimeManager:
        return self._lifetime_manager

    @property
    def circular_detector(self) -> CircularDependencyDetector:
        return self._circular_detector

    @property
    def disposal_tracker(self) -> DisposalTracker:
        return self._disposal_tracker

    def get_decorators(self, dependency_type: Any) -> List[Callable[[Any], Any]]:
        """Return the decorators registered on this container for a type, in order."""
        return list(self._decorators.get(dependency_type, ()))

    def _check_disposed(self) -> None:
        if self._is_disposed:
            raise ContainerDisposedError()

    def _add_entry(self, entry: RegistrationEntry) -> None:
        self._registry.add(entry)
        logger.debug(
            "Registered dependency",
            dependency_type=describe_type(entry.dependency_type),
            lifetime=entry.lifetime.value,
            key=entry.key,
        )

    def register(
        self,
        dependency_type: Any,
        factory: Callable[[IContainer], Any],
        lifetime: Lifetime = Lifetime.TRANSIENT,
        key: Optional[str] = None,
    ) -> None:
        """Register a factory for a type identifier.

        Args:
            dependency_type: The type to register.
            factory: Factory function receiving the requesting container.
            lifetime: How long the instance should live.
            key: Optional discriminator; None is the default registration.

        Raises:
            ContainerDisposedError: If the container has been disposed.
            DuplicateRegistrationError: If the (type, key) pair is already registered here.

        Example:
            >>> container.register(Database, lambda c: Database("conn-string-A"), Lifetime.SINGLETON)
            >>> container.register(Repository, lambda c: Repository(c.resolve(Database)))
        """
        registration = Registration(dependency_type=dependency_type, factory=factory, lifetime=lifetime, key=key)
        self.add_registration(registration)

    def add_registration(self, registration: Registration) -> None:
        """Add a prebuilt registration, e.g. one produced by ``RegistrationBuilder``.

        Raises:
            ContainerDisposedError: If the container has been disposed.
            DuplicateRegistrationError: If the (type, key) pair is already registered here.
        """
        with self._lock:
            self._check_disposed()
            self._add_entry(RegistrationEntry(registration=registration))

    def register_instance(self, dependency_type: Any, instance: Any, key: Optional[str] = None) -> None:
        """Register an existing object as a singleton.

        A disposable instance is tracked and disposed with the container.

        Raises:
            ContainerDisposedError: If the container has been disposed.
            DuplicateRegistrationError: If the (type, key) pair is already registered here.
        """
        with self._lock:
            self._check_disposed()
            registration = Registration(
                dependency_type=dependency_type,
                factory=lambda _: instance,
                lifetime=Lifetime.SINGLETON,
                key=key,
            )
            entry = RegistrationEntry(registration=registration)
            entry.set_instance(instance)
            self._add_entry(entry)
            self._disposal_tracker.track(instance)

    def register_singletons(self, dependencies: Dict[Any, Callable[[IContainer], Any]]) -> None:
        """Register multiple singleton dependencies at once.

        Singleton dependencies are created once and shared by every container
        that reaches the registration.

        Example:
            >>> container.register_singletons({
            ...     DatabaseConfig: lambda c: DatabaseConfig.from_env(),
            ...     DatabaseConnection: lambda c: DatabaseConnection(c.resolve(DatabaseConfig)),
            ... })
        """
        for dependency_type, factory in dependencies.items():
            self.register(dependency_type, factory, Lifetime.SINGLETON)

    def register_transients(self, dependencies: Dict[Any, Callable[[IContainer], Any]]) -> None:
        """Register multiple transient dependencies at once.

        Transient dependencies are created fresh on each resolution.
        """
        for dependency_type, factory in dependencies.items():
            self.register(dependency_type, factory, Lifetime.TRANSIENT)

    def register_scoped(self, dependencies: Dict[Any, Callable[[IContainer], Any]]) -> None:
        """Register multiple scoped dependencies at once.

        Scoped dependencies are created once per resolving container.
        """
        for dependency_type, factory in dependencies.items():
            self.register(dependency_type, factory, Lifetime.SCOPED)

    def resolve(self, dependency_type: Type[T], key: Optional[str] = None) -> T:
        """Resolve and return an instance of the specified type.

        Args:
            dependency_type: The type to resolve.
            key: Optional registration key. Falls back to the default registration
                of the same container before consulting the parent.

        Returns:
            The decorated instance.

        Raises:
            ContainerDisposedError: If the container has been disposed.
            RegistrationNotFoundError: If no registration is reachable.
            CircularDependencyError: If a circular dependency is detected.
            UnresolvableError: If a factory or decorator raised.

        Example:
            >>> repository = container.resolve(Repository)
        """
        with self._lock:
            self._check_disposed()
            return self._resolver.resolve(self, dependency_type, key)

    def resolve_all(self, dependency_type: Type[T]) -> List[T]:
        """Resolve every registration of a type from this container and its ancestors.

        Returns an empty list when nothing is registered.

        Raises:
            ContainerDisposedError: If the container has been disposed.
        """
        with self._lock:
            self._check_disposed()
            return self._resolver.resolve_all(self, dependency_type)

    def is_registered(self, dependency_type: Any, key: Optional[str] = None) -> bool:
        """Tell whether ``resolve`` would find a registration for the pair.

        Raises:
            ContainerDisposedError: If the container has been disposed.
        """
        with self._lock:
            self._check_disposed()
            try:
                self._resolver.find_registration(self, dependency_type, key)
                return True
            except RegistrationNotFoundError:
                return False

    def create_child_container(self) -> "DIContainer":
        """Create a child container that falls back to this one for lookups.

        Raises:
            ContainerDisposedError: If the container has been disposed.
        """
        with self._lock:
            self._check_disposed()
            return DIContainer(parent=self)

    def create_scope(self) -> ContainerScope:
        """Create a scope over a new child container.

        Scoped dependencies resolved through the scope live in the child's store
        and are disposed with the scope. Registrations of this container remain
        visible through the parent chain.

        Example:
            >>> with container.create_scope() as scope:
            ...     ctx1 = scope.resolve(RequestContext)
            ...     ctx2 = scope.resolve(RequestContext)
            ...     assert ctx1 is ctx2
        """
        scope = ContainerScope(self.create_child_container())
        logger.debug("Created scope")
        return scope

    def add_decorator(self, dependency_type: Type[T], decorator: Callable[[T], T]) -> None:
        """Append a transform applied to every instance of the type resolved from this container.

        Decorators are not inherited by child containers. They run on every
        resolution, cached lifetimes included: a decorator returning a new
        disposable wrapper around a singleton adds one tracked object per
        resolution, released when this container is disposed.

        Raises:
            ContainerDisposedError: If the container has been disposed.
        """
        with self._lock:
            self._check_disposed()
            self._decorators.setdefault(dependency_type, []).append(decorator)

    def add_module(self, module: IModule) -> None:
        """Let a module register its dependencies on this container.

        Raises:
            ContainerDisposedError: If the container has been disposed.
        """
        with self._lock:
            self._check_disposed()
            module.configure(self)

    def validate(self) -> None:
        """Resolve every registration of this container, reporting all failures at once.

        Successful resolutions fill singleton and scoped caches.

        Raises:
            ContainerDisposedError: If the container has been disposed.
            ContainerValidationError: If any registration failed to resolve.
        """
        with self._lock:
            self._check_disposed()
            ContainerValidator.validate(self)

    def dispose(self) -> None:
        """Dispose scoped instances, registrations and tracked objects, then clear decorators.

        Every object is disposed at most once. A failing object is logged and the
        teardown continues. Calling this more than once is a no-op.
        """
        with self._lock:
            if self._is_disposed:
                return

            disposed: Set[int] = set()

            for instance in self._lifetime_manager.scoped_instances():
                if is_disposable(instance) and id(instance) not in disposed:
                    disposed.add(id(instance))
                    dispose_quietly(instance)
            self._lifetime_manager.clear_scoped_cache()

            for dependency_type, key, entry in self._registry.entries():
                instance = entry.cached_instance if entry.has_instance else None
                if is_disposable(instance):
                    if id(instance) in disposed:
                        entry.reset()
                    disposed.add(id(instance))
                try:
                    entry.dispose()
                except Exception as e:
                    logger.error(
                        "Error during disposal",
                        dependency_type=describe_type(dependency_type),
                        key=key,
                        error=str(e),
                    )
            self._registry.clear()

            self._disposal_tracker.dispose_all(disposed)

            self._decorators.clear()
            if self._parent is None:
                self._circular_detector.clear()
            self._is_disposed = True
            logger.info("Container disposed", is_scope=self._parent is not None)

    def clear(self) -> None:
        """Drop registrations, caches, decorators and tracked objects without disposing them.

        Useful for testing or resetting the container state.
        """
        with self._lock:
            self._check_disposed()
            self._registry.clear()
            self._lifetime_manager.clear_scoped_cache()
            self._disposal_tracker.clear()
            self._decorators.clear()
            if self._parent is None:
                self._circular_detector.clear()

    def __enter__(self) -> "DIContainer":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        self.dispose()
        return False
