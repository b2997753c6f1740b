"""Application layer - Eager validation of container registrations."""

from typing import TYPE_CHECKING, List

import structlog

from nested_di.domain import ContainerValidationError, ValidationFailure
from nested_di.domain.exceptions import describe_type

if TYPE_CHECKING:
    from nested_di.application.container import DIContainer

logger = structlog.get_logger(__name__)


class ContainerValidator:
    """Exercises every local registration to surface configuration errors early.

    Validation resolves for real: singleton and scoped caches of the validated
    container are populated as a side effect, exactly as a normal resolution
    would populate them.
    """

    @staticmethod
    def validate(container: "DIContainer") -> None:
        """Resolve every (type, key) registered directly on ``container``.

        Parent registrations are not validated. All failures are collected
        before reporting.

        Raises:
            ContainerValidationError: If at least one registration failed to resolve.
        """
        failures: List[ValidationFailure] = []

        for dependency_type, key, _ in container.registry.entries():
            try:
                container.resolver.resolve(container, dependency_type, key)
            except Exception as e:
                failures.append(ValidationFailure(dependency_type=dependency_type, key=key, error=e))

        if failures:
            logger.warning(
                "Container validation failed",
                failures=[f"{describe_type(f.dependency_type)}[{f.key}]" for f in failures],
            )
            raise ContainerValidationError(failures)
