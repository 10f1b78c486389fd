# room_directory/main.py
"""ASGI application for the room directory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .api.v1.api import api_router
from .config import Settings, get_settings, validate_settings
from .core.exceptions import AppError
from .database import check_db_health, db_manager, init_db
from .logging_config import logging_config_for

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def render_app_error(request: Request, exc: AppError):
        log = logger.error if exc.status_code >= 500 else logger.info
        log("%s %s -> %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(SQLAlchemyError)
    async def render_storage_error(request: Request, exc: SQLAlchemyError):
        # Connection strings and SQL stay in the log
        logger.error(
            "Storage failure on %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(
            status_code=500, content={"detail": "A storage error occurred."}
        )

    @app.exception_handler(Exception)
    async def render_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(
            status_code=500, content={"detail": "An internal server error occurred."}
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        for problem in validate_settings(settings):
            logger.warning("Configuration problem: %s", problem)

        await init_db(
            settings.DATABASE_URL,
            create_tables=settings.DB_CREATE_TABLES,
            **settings.engine_options,
        )
        logger.info("%s %s ready", settings.APP_NAME, settings.APP_VERSION)
        try:
            yield
        finally:
            await db_manager.close()

    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description=(
            "Search a facility's rooms by building, type, capacity, floor, "
            "accessibility, name and equipment."
        ),
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_exception_handlers(app)
    app.include_router(api_router, prefix=API_PREFIX)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/", include_in_schema=False)
    async def index():
        return {
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "api": API_PREFIX,
            "docs": app.docs_url,
        }

    @app.get("/health", tags=["Service"])
    async def health():
        """Reports whether the directory store answers queries."""
        database = await check_db_health()
        return {
            "status": database["status"],
            "service": "room-directory",
            "version": __version__,
            "database": database,
        }

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "room_directory.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_config=logging_config_for(settings),
    )


if __name__ == "__main__":
    run()
