"""
FastAPI application entry point.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from firebase_crud.config import get_settings
from firebase_crud.errors import CrudError, StoreFailureError
from firebase_crud.routes import router

API_VERSION = "0.1.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(f"Starting Firebase CRUD backend v{API_VERSION}")
    if settings.use_in_memory_backends:
        logger.info("Using in-memory backends")
    yield
    logger.info("Shutting down Firebase CRUD backend")


async def crud_error_handler(request: Request, exc: CrudError):
    if isinstance(exc, StoreFailureError):
        logger.error(
            "%s %s failed: %s (%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.detail,
            exc_info=exc.__cause__,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions with a generic error response."""
    logger.exception(f"Unhandled exception on {request.url.path}")

    content = {"kind": "error", "message": "Internal server error"}
    if get_settings().debug:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Firebase CRUD Backend", version=API_VERSION, lifespan=lifespan
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            f"{request.method} {request.url.path} "
            f"-> {response.status_code} ({duration_ms:.0f}ms)"
        )
        return response

    app.add_exception_handler(CrudError, crud_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
