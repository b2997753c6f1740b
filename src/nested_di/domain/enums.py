from enum import Enum


class Lifetime(str, Enum):
    """Defines the lifetime of a dependency instance.

    Attributes:
        TRANSIENT: New instance created on each resolution, never tracked for teardown.
        SCOPED: Single instance per resolving container (e.g., per HTTP request scope).
        SINGLETON: Single instance cached on the registration itself.
    """

    TRANSIENT = "transient"
    SCOPED = "scoped"
    SINGLETON = "singleton"

    def __str__(self) -> str:
        return self.value
