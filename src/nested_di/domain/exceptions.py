from typing import Any, List, Optional, Sequence


def describe_type(dependency_type: Any) -> str:
    """Return a readable name for a type identifier."""
    return getattr(dependency_type, "__name__", repr(dependency_type))


def describe_key(key: Optional[str]) -> str:
    return f" with key '{key}'" if key is not None else ""


class DIException(Exception):
    """Base exception for DI-related errors."""


class ContainerDisposedError(DIException):
    """Raised when an operation is attempted on a disposed container, scope or registration."""

    def __init__(self, message: str = "Container has been disposed") -> None:
        super().__init__(message)


class DuplicateRegistrationError(DIException):
    """Raised when a (type, key) pair is registered twice in the same container.

    Attributes:
        dependency_type: The type identifier that was already registered.
        key: The registration key, or None for the default registration.
    """

    def __init__(self, dependency_type: Any, key: Optional[str] = None) -> None:
        self.dependency_type = dependency_type
        self.key = key
        super().__init__(f"Duplicate registration for type {describe_type(dependency_type)}{describe_key(key)}")


class RegistrationNotFoundError(DIException):
    """Raised when no registration exists anywhere in the container hierarchy.

    Attributes:
        dependency_type: The requested type identifier.
        key: The requested registration key, if any.
    """

    def __init__(self, dependency_type: Any, key: Optional[str] = None) -> None:
        self.dependency_type = dependency_type
        self.key = key
        super().__init__(f"No registration found for type {describe_type(dependency_type)}{describe_key(key)}")


class CircularDependencyError(DIException):
    """Raised when a circular dependency is detected.

    Attributes:
        dependency_chain: The in-flight resolution stack, oldest first, ending
            with the type that closed the cycle.
    """

    def __init__(self, dependency_chain: Sequence[Any]) -> None:
        self.dependency_chain = list(dependency_chain)
        message = f"Circular dependency detected: {' -> '.join(describe_type(t) for t in self.dependency_chain)}"
        super().__init__(message)


class UnresolvableError(DIException):
    """Raised when a factory or decorator fails while resolving a dependency.

    The original exception is available as ``__cause__``.

    Attributes:
        dependency_type: The type that was being resolved.
        key: The requested registration key, if any.
        reason: Optional reason for the failure.
    """

    def __init__(self, dependency_type: Any, reason: Optional[str] = None, key: Optional[str] = None) -> None:
        self.dependency_type = dependency_type
        self.key = key
        self.reason = reason
        message = f"Cannot resolve dependency for type: {describe_type(dependency_type)}{describe_key(key)}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class ContainerValidationError(DIException):
    """Raised by validation when one or more registrations fail to resolve.

    Attributes:
        failures: One ``ValidationFailure`` per failing (type, key) pair.
    """

    def __init__(self, failures: List[Any]) -> None:
        self.failures = failures
        lines = [
            f"{describe_type(failure.dependency_type)}{describe_key(failure.key)}: {failure.error}"
            for failure in failures
        ]
        super().__init__("Container validation failed:\n" + "\n".join(lines))
