import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Request

from tiny_ioc.core import Container

logger = logging.getLogger(__name__)


@asynccontextmanager
async def add_container_to_app(app: FastAPI, container: Container):
    """
    Makes ``container`` the root scope of the app for the duration of the context,
    meant to be entered from the app lifespan.

    Args:
        app (FastAPI): The FastAPI app to add the container to.
        container (Container): The container every request scope is created from.
    """
    logger.debug("adding root scope to the fast api app")
    app.state.root_scope = container
    try:
        yield container
    finally:
        logger.debug("releasing root scope from the fast api app")
        del app.state.root_scope


def get_root_scope_from_app(app: FastAPI) -> Container:
    return app.state.root_scope


async def get_scope(request: Request) -> Container:
    """One child scope per request, shared by every dependency of that request."""
    if "current_scope" in request.state._state:
        return request.state.current_scope

    scope = get_root_scope_from_app(request.app).create_scope()
    request.state.current_scope = scope
    return scope


def Resolve(key: Any, tag: str | None = None) -> Any:  # noqa: N802
    """
    Resolve a key from the request scope, acts as a FastAPI dependency.
    This can be used as a drop in replacement for Depends in FastAPI routes.

    Args:
        key: The resolve key of the service.
        tag: Optional registration tag.
    """

    async def resolver(scope: Container = Depends(get_scope)):
        return scope.resolve(key, tag)

    return Depends(resolver)
