"""Unit tests for FastAPI integration."""

from unittest.mock import Mock

import pytest
from fastapi import FastAPI, Request
from starlette.datastructures import State
from starlette.responses import Response

from nested_di.application.container import DIContainer
from nested_di.application.scope import ContainerScope
from nested_di.domain import Lifetime, RegistrationNotFoundError
from nested_di.infrastructure.fastapi_integration.integration import (
    ScopedContainerMiddleware,
    create_fastapi_dependency,
    create_scoped_dependency,
    get_request_scope,
)


class RequestContext:
    def __init__(self):
        self.dispose_calls = 0

    def dispose(self):
        self.dispose_calls += 1


class Settings:
    def __init__(self, env="prod"):
        self.env = env


def make_request():
    request = Mock(spec=Request)
    request.state = State()
    return request


class TestGetRequestScope:
    """Test cases for get_request_scope function."""

    def test_returns_scope_stored_on_request(self):
        request = make_request()
        scope = DIContainer().create_scope()
        request.state.di_container = scope

        assert get_request_scope(request) is scope

    def test_missing_scope_raises(self):
        with pytest.raises(RuntimeError, match="Did you forget"):
            get_request_scope(make_request())


class TestCreateFastAPIDependency:
    """Test cases for create_fastapi_dependency function."""

    def test_dependency_function_resolves_from_container(self):
        container = DIContainer()
        container.register(Settings, lambda c: Settings(), Lifetime.SINGLETON)

        dependency_func = create_fastapi_dependency(container, Settings)

        assert dependency_func() is dependency_func()

    def test_dependency_function_with_key(self):
        container = DIContainer()
        container.register(Settings, lambda c: Settings("staging"), key="staging")

        dependency_func = create_fastapi_dependency(container, Settings, "staging")

        assert dependency_func().env == "staging"

    def test_transient_instances_differ(self):
        container = DIContainer()
        container.register(Settings, lambda c: Settings())

        dependency_func = create_fastapi_dependency(container, Settings)

        assert dependency_func() is not dependency_func()

    def test_unregistered_type_raises(self):
        dependency_func = create_fastapi_dependency(DIContainer(), Settings)

        with pytest.raises(RegistrationNotFoundError):
            dependency_func()


class TestCreateScopedDependency:
    """Test cases for create_scoped_dependency function."""

    def test_resolves_from_request_scope(self):
        container = DIContainer()
        container.register(RequestContext, lambda c: RequestContext(), Lifetime.SCOPED)
        request = make_request()
        request.state.di_container = container.create_scope()

        dependency_func = create_scoped_dependency(RequestContext)

        assert dependency_func(request) is dependency_func(request)

    def test_missing_scope_raises(self):
        dependency_func = create_scoped_dependency(RequestContext)

        with pytest.raises(RuntimeError, match="ScopedContainerMiddleware"):
            dependency_func(make_request())


class TestScopedContainerMiddleware:
    """Test cases for ScopedContainerMiddleware."""

    def test_middleware_initialization(self):
        app = FastAPI()
        container = DIContainer()

        middleware = ScopedContainerMiddleware(app, container)

        assert middleware.container is container
        assert middleware.app is app

    @pytest.mark.asyncio
    async def test_middleware_opens_scope_for_request(self):
        container = DIContainer()
        middleware = ScopedContainerMiddleware(FastAPI(), container)
        request = make_request()

        async def mock_call_next(req):
            assert isinstance(req.state.di_container, ContainerScope)
            assert req.state.di_container.container.parent is container
            return Response("OK", status_code=200)

        response = await middleware.dispatch(request, mock_call_next)

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_middleware_disposes_scope_after_request(self):
        container = DIContainer()
        container.register(RequestContext, lambda c: RequestContext(), Lifetime.SCOPED)
        middleware = ScopedContainerMiddleware(FastAPI(), container)
        request = make_request()
        resolved = []

        async def mock_call_next(req):
            resolved.append(req.state.di_container.resolve(RequestContext))
            return Response("OK", status_code=200)

        await middleware.dispatch(request, mock_call_next)

        assert request.state.di_container.is_disposed
        assert resolved[0].dispose_calls == 1

    @pytest.mark.asyncio
    async def test_middleware_disposes_scope_on_exception(self):
        container = DIContainer()
        middleware = ScopedContainerMiddleware(FastAPI(), container)
        request = make_request()

        async def mock_call_next(req):
            raise ValueError("handler failed")

        with pytest.raises(ValueError):
            await middleware.dispatch(request, mock_call_next)

        assert request.state.di_container.is_disposed
        assert not container.is_disposed
