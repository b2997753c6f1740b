"""Unit tests for ContainerScope."""

import pytest

from nested_di.application.container import DIContainer
from nested_di.application.scope import ContainerScope
from nested_di.domain import ContainerDisposedError, Lifetime


class RequestContext:
    def __init__(self):
        self.disposed = 0

    def dispose(self):
        self.disposed += 1


@pytest.fixture
def container():
    container = DIContainer()
    container.register(RequestContext, lambda c: RequestContext(), Lifetime.SCOPED)
    return container


class TestContainerScope:
    """Test cases for ContainerScope."""

    def test_create_scope_returns_scope_over_child(self, container):
        scope = container.create_scope()

        assert isinstance(scope, ContainerScope)
        assert scope.container.parent is container

    def test_resolve_delegates(self, container):
        scope = container.create_scope()

        assert scope.resolve(RequestContext) is scope.resolve(RequestContext)

    def test_resolve_all_and_is_registered(self, container):
        scope = container.create_scope()

        assert len(scope.resolve_all(RequestContext)) == 1
        assert scope.is_registered(RequestContext)
        # Unknown keys fall back to the default registration
        assert scope.is_registered(RequestContext, "missing")

    def test_nested_scope(self, container):
        outer = container.create_scope()
        inner = outer.create_scope()

        assert inner.container.parent is outer.container
        assert inner.resolve(RequestContext) is not outer.resolve(RequestContext)

    def test_dispose_disposes_scoped_instances(self, container):
        scope = container.create_scope()
        context = scope.resolve(RequestContext)

        scope.dispose()

        assert context.disposed == 1
        assert scope.is_disposed
        assert scope._container.is_disposed

    def test_dispose_is_idempotent(self, container):
        scope = container.create_scope()
        context = scope.resolve(RequestContext)

        scope.dispose()
        scope.dispose()

        assert context.disposed == 1

    @pytest.mark.parametrize(
        "operation",
        [
            lambda s: s.resolve(RequestContext),
            lambda s: s.resolve_all(RequestContext),
            lambda s: s.is_registered(RequestContext),
            lambda s: s.create_scope(),
            lambda s: s.container,
        ],
    )
    def test_operations_fail_after_dispose(self, container, operation):
        scope = container.create_scope()
        scope.dispose()

        with pytest.raises(ContainerDisposedError):
            operation(scope)

    def test_context_manager_disposes(self, container):
        with container.create_scope() as scope:
            context = scope.resolve(RequestContext)

        assert context.disposed == 1
        assert scope.is_disposed

    def test_scope_disposal_leaves_parent_usable(self, container):
        with container.create_scope() as scope:
            scope.resolve(RequestContext)

        assert not container.is_disposed
        assert isinstance(container.resolve(RequestContext), RequestContext)
