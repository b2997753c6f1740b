"""Application layer - Fluent registration and container building."""

from typing import Any, Callable, List, Optional, Type, TypeVar

from nested_di.application.container import DIContainer
from nested_di.domain import ContainerOptions, IContainer, IModule, Lifetime, Registration

T = TypeVar("T")


class RegistrationBuilder:
    """Fluent builder producing a ``Registration``.

    The default lifetime is transient.

    Example:
        >>> registration = (
        ...     RegistrationBuilder(ApiService, lambda c: ApiServiceImpl())
        ...     .with_key("default")
        ...     .as_singleton()
        ...     .build()
        ... )
    """

    def __init__(self, dependency_type: Any, factory: Callable[[IContainer], Any]) -> None:
        self._dependency_type = dependency_type
        self._factory = factory
        self._key: Optional[str] = None
        self._lifetime = Lifetime.TRANSIENT

    def with_key(self, key: str) -> "RegistrationBuilder":
        self._key = key
        return self

    def as_singleton(self) -> "RegistrationBuilder":
        return self.with_lifetime(Lifetime.SINGLETON)

    def as_scoped(self) -> "RegistrationBuilder":
        return self.with_lifetime(Lifetime.SCOPED)

    def as_transient(self) -> "RegistrationBuilder":
        return self.with_lifetime(Lifetime.TRANSIENT)

    def with_lifetime(self, lifetime: Lifetime) -> "RegistrationBuilder":
        self._lifetime = Lifetime(lifetime)
        return self

    def build(self) -> Registration:
        return Registration(
            dependency_type=self._dependency_type,
            factory=self._factory,
            lifetime=self._lifetime,
            key=self._key,
        )


class ContainerBuilder:
    """Collects registrations, modules and decorators, then builds a validated container.

    Registrations started with ``register`` are finalized when ``build`` runs, so
    they can be configured fluently after the call.

    Example:
        >>> builder = ContainerBuilder()
        >>> builder.register(Database, lambda c: Database("conn-string-A")).as_singleton()
        >>> builder.register(Repository, lambda c: Repository(c.resolve(Database)))
        >>> container = builder.build()
    """

    def __init__(self, options: Optional[ContainerOptions] = None, parent: Optional[DIContainer] = None) -> None:
        self.container = DIContainer(parent=parent, options=options)
        self._pending: List[RegistrationBuilder] = []

    @classmethod
    def with_parent(cls, parent: DIContainer) -> "ContainerBuilder":
        """Create a builder whose container is a child of ``parent``."""
        return cls(parent=parent)

    def register(self, dependency_type: Type[T], factory: Callable[[IContainer], T]) -> RegistrationBuilder:
        registration_builder = RegistrationBuilder(dependency_type, factory)
        self._pending.append(registration_builder)
        return registration_builder

    def add_registration(self, registration: Registration) -> "ContainerBuilder":
        self.container.add_registration(registration)
        return self

    def register_instance(self, dependency_type: Any, instance: Any, key: Optional[str] = None) -> "ContainerBuilder":
        self.container.register_instance(dependency_type, instance, key)
        return self

    def add_module(self, module: IModule) -> "ContainerBuilder":
        self.container.add_module(module)
        return self

    def add_decorator(self, dependency_type: Type[T], decorator: Callable[[T], T]) -> "ContainerBuilder":
        self.container.add_decorator(dependency_type, decorator)
        return self

    def build(self) -> DIContainer:
        """Add pending registrations and return the container.

        Raises:
            DuplicateRegistrationError: If two registrations share a (type, key) pair.
            ContainerValidationError: If validation is enabled and a registration fails.
        """
        pending, self._pending = self._pending, []
        for registration_builder in pending:
            self.container.add_registration(registration_builder.build())
        if self.container.options.validate_on_build:
            self.container.validate()
        return self.container
