"""
Main entrypoint for the Trip Catalog API.

This module assembles the FastAPI application: it sets up logging,
builds the shared components (database, trip collection, cache and
services), registers exception handlers and includes the versioned
routers.  The ``create_app`` function builds and configures the app,
which is then instantiated at module import time as ``app``, e.g.::

    uvicorn trip_catalog_api.app.main:app --reload
"""

import logging
import traceback
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.router import router as v1_router
from .core.cache import SimpleCache
from .core.collection import TripCollection
from .core.config import Settings, settings
from .core.db import Database
from .core.errors import TripCatalogError
from .core.logging_config import setup_logging
from .services.trip_service import TripService
from .services.user_service import UserService


logger = logging.getLogger(__name__)


def _error_body(message: str, exc: Optional[BaseException], debug: bool) -> Dict[str, Any]:
    body: Dict[str, Any] = {"status": "error", "message": message}
    if debug and exc is not None:
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return body


def _log_error(request: Request, status_code: int, message: str, exc: Optional[BaseException] = None) -> None:
    if status_code >= 500:
        logger.error("Server error on %s %s: %s", request.method, request.url.path, message, exc_info=exc)
    else:
        logger.warning("Client error %s on %s %s: %s", status_code, request.method, request.url.path, message)


def register_exception_handlers(app: FastAPI, debug: bool) -> None:
    """Render every error as ``{"status": "error", "message": ...}``."""

    @app.exception_handler(TripCatalogError)
    async def catalog_error_handler(request: Request, exc: TripCatalogError) -> JSONResponse:
        _log_error(request, exc.status_code, exc.message, exc)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc, debug))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = str(exc.detail)
        if exc.status_code == 404 and message == "Not Found":
            message = f"Route {request.url.path} not found"
        _log_error(request, exc.status_code, message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(message, None, debug),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=_error_body(str(exc), exc, debug))


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use instead of the environment‑derived defaults
        (tests pass a temporary database here).

    Returns
    -------
    FastAPI
        A configured FastAPI instance ready to be served.
    """
    app_settings = app_settings or settings
    setup_logging(app_settings.log_level, app_settings.log_file or None)

    database = Database(app_settings.database_url)
    cache = SimpleCache()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Apply migrations at startup; creates the database file if needed.
        database.init_db()
        logger.info("Database ready at %s", database.path)
        yield
        cache.clear_all()

    app = FastAPI(title=app_settings.project_name, version=app_settings.api_version, lifespan=lifespan)
    app.state.settings = app_settings
    app.state.cache = cache
    app.state.trips = TripService(TripCollection(database), cache)
    app.state.users = UserService(database)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"],
    )
    register_exception_handlers(app, app_settings.debug)

    # Mount versioned routes under /api/v1.
    app.include_router(v1_router, prefix="/api/v1")
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
