from typing import Awaitable, Callable, Optional, Type, TypeVar

import structlog
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from nested_di.application import ContainerScope, DIContainer

logger = structlog.get_logger(__name__)

T = TypeVar("T")

REQUEST_SCOPE_ATTRIBUTE = "di_container"


def get_request_scope(request: Request) -> ContainerScope:
    """Return the scope opened for the request by ``ScopedContainerMiddleware``.

    Raises:
        RuntimeError: If the middleware is not installed on the application.
    """
    scope = getattr(request.state, REQUEST_SCOPE_ATTRIBUTE, None)
    if scope is None:
        raise RuntimeError("Request does not have a DI scope. Did you forget to add ScopedContainerMiddleware?")
    return scope


def create_fastapi_dependency(
    container: DIContainer, dependency_type: Type[T], key: Optional[str] = None
) -> Callable[[], T]:
    """Build a ``Depends()`` callable resolving straight from ``container``.

    No request scope is involved: scoped registrations are cached in
    ``container`` itself and live as long as it does.

    Example:
        >>> get_orders = create_fastapi_dependency(container, OrderRepository)
        >>>
        >>> @app.get("/orders")
        >>> async def list_orders(repo: OrderRepository = Depends(get_orders)):
        ...     return repo.all()
    """

    def dependency() -> T:
        return container.resolve(dependency_type, key)

    return dependency


def create_scoped_dependency(dependency_type: Type[T], key: Optional[str] = None) -> Callable[[Request], T]:
    """Build a ``Depends()`` callable resolving from the current request scope.

    Scoped registrations yield one instance per request, shared by every
    dependency of that request and disposed when the response is sent.

    Example:
        >>> app.add_middleware(ScopedContainerMiddleware, container=container)
        >>> get_unit_of_work = create_scoped_dependency(UnitOfWork)
        >>>
        >>> @app.post("/orders")
        >>> async def create_order(uow: UnitOfWork = Depends(get_unit_of_work)):
        ...     uow.commit()
    """

    def scoped_dependency(request: Request) -> T:
        return get_request_scope(request).resolve(dependency_type, key)

    return scoped_dependency


class ScopedContainerMiddleware(BaseHTTPMiddleware):
    """Open a ``ContainerScope`` per request and dispose it after the response.

    The scope is a child of ``container`` stored on
    ``request.state.di_container``. Disposal runs even when the endpoint
    raises.
    """

    def __init__(self, app: FastAPI, container: DIContainer):
        super().__init__(app)
        self.container = container

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        scope = self.container.create_scope()
        setattr(request.state, REQUEST_SCOPE_ATTRIBUTE, scope)

        try:
            return await call_next(request)
        finally:
            scope.dispose()
            logger.debug("Request scope disposed", path=request.url.path)
