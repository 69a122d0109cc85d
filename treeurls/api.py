"""
FastAPI app factory wiring the tree-urls routers to a storage backend.
Build with `create_app(store)`; `treeurls.server` runs it under uvicorn.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .responses import not_found
from .storage import TreeURLStore

logger = logging.getLogger(__name__)


def create_app(store: TreeURLStore) -> FastAPI:
    app = FastAPI(
        title="tree-urls",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.state.store = store

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # unknown paths and unsupported methods both read as "no such route"
        if exc.status_code in (404, 405):
            return not_found(f"no route for {request.method} {request.url.path}")
        return PlainTextResponse(f"{exc.detail}\n", status_code=exc.status_code)

    @app.on_event("shutdown")
    def on_shutdown():
        try:
            store.close()
        except Exception as e:
            logger.error(f"closing storage failed: {e}")

    from .routes import base as base_routes
    from .routes import tree_urls as tree_urls_routes

    app.include_router(base_routes.router)
    app.include_router(tree_urls_routes.router)
    return app
