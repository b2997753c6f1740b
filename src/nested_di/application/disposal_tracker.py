"""Application layer - Tracking of disposable instances for container teardown."""

from typing import Any, Iterable, List, Optional, Set

import structlog

from nested_di.domain import is_disposable
from nested_di.domain.exceptions import describe_type

logger = structlog.get_logger(__name__)


def dispose_quietly(instance: Any) -> bool:
    """Call ``dispose`` on an instance, logging instead of raising on failure.

    Returns:
        True if the call completed without raising.
    """
    try:
        instance.dispose()
        return True
    except Exception as e:
        logger.error("Error during disposal", instance=describe_type(type(instance)), error=str(e))
        return False


class DisposalTracker:
    """Ordered collection of disposable objects drained on container teardown.

    Objects are tracked at most once, compared by identity.

    Attributes:
        _tracked: Tracked objects in tracking order.
        _ids: Identities of the tracked objects.
    """

    def __init__(self) -> None:
        self._tracked: List[Any] = []
        self._ids: Set[int] = set()

    def track(self, instance: Any) -> bool:
        """Track a disposable object.

        Returns:
            True if the object was newly tracked, False if it is not disposable
            or already tracked.
        """
        if not is_disposable(instance) or id(instance) in self._ids:
            return False
        self._tracked.append(instance)
        self._ids.add(id(instance))
        return True

    def dispose_all(self, already_disposed: Optional[Iterable[int]] = None) -> Set[int]:
        """Dispose every tracked object not listed in ``already_disposed``.

        A failing object is logged and skipped; the remaining objects are still disposed.

        Args:
            already_disposed: Identities of objects disposed by an earlier teardown step.

        Returns:
            Identities of the objects this call attempted to dispose.
        """
        skip = set(already_disposed or ())
        attempted: Set[int] = set()
        for instance in self._tracked:
            if id(instance) in skip or id(instance) in attempted:
                continue
            attempted.add(id(instance))
            dispose_quietly(instance)
        self.clear()
        return attempted

    def clear(self) -> None:
        """Forget every tracked object without disposing it."""
        self._tracked.clear()
        self._ids.clear()

    def __contains__(self, instance: Any) -> bool:
        return id(instance) in self._ids

    def __len__(self) -> int:
        return len(self._tracked)
