"""Application layer - Per-thread tracking of in-flight resolutions."""

import threading
from typing import Any, List

from nested_di.domain import ResolutionContext


class CircularDependencyDetector:
    """Owns one ``ResolutionContext`` per thread for a single container.

    A factory that resolves nested dependencies runs on the caller's thread,
    so it sees the caller's stack and a type requested twice on the same path
    is reported as a cycle. Threads resolving concurrently never see each
    other's entries.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    def _get_context(self) -> ResolutionContext:
        context = getattr(self._local, "context", None)
        if context is None:
            context = self._local.context = ResolutionContext()
        return context

    def push(self, dependency_type: Any) -> None:
        """Mark ``dependency_type`` as being resolved on this thread.

        Raises:
            CircularDependencyError: If the type is already in flight. The
                error chain ends with the repeated type.

        Example:
            >>> detector.push(OrderService)
            >>> detector.push(PaymentGateway)
            >>> detector.push(OrderService)  # CircularDependencyError
        """
        self._get_context().push(dependency_type)

    def pop(self) -> None:
        self._get_context().pop()

    def contains(self, dependency_type: Any) -> bool:
        return self._get_context().contains(dependency_type)

    @property
    def chain(self) -> List[Any]:
        """Copy of this thread's in-flight stack, oldest first."""
        return self._get_context().chain

    def clear(self) -> None:
        """Forget this thread's stack."""
        context = getattr(self._local, "context", None)
        if context is not None:
            context.clear()
