"""Application factory.

Serve with ``uvicorn --factory potluck.main:create_app``; nothing is connected at import time.
"""

import logging

import potluck.models  # noqa: F401
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from potluck.core.config import Settings
from potluck.core.config import settings as default_settings
from potluck.core.db import Database
from potluck.core.errors import PotluckError, StorageError, classify
from potluck.core.invalidation import InvalidationBus
from potluck.routers import actions as actions_router
from potluck.routers import audit as audit_router
from potluck.routers import auth as auth_router
from potluck.routers import days as days_router
from potluck.routers import events as events_router
from potluck.routers import ingredients as ingredients_router
from potluck.routers import items as items_router
from potluck.routers import meals as meals_router
from potluck.routers import people as people_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    app = FastAPI(title="Potluck API", version="0.1.0")
    app.state.settings = settings
    app.state.database = database or Database(settings.DATABASE_URL)
    app.state.invalidation = InvalidationBus()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router.router)
    app.include_router(events_router.router)
    app.include_router(days_router.router)
    app.include_router(meals_router.router)
    app.include_router(items_router.router)
    app.include_router(ingredients_router.router)
    app.include_router(people_router.router)
    app.include_router(actions_router.router)
    app.include_router(audit_router.router)

    @app.exception_handler(PotluckError)
    async def handle_potluck_error(request: Request, exc: PotluckError) -> JSONResponse:
        if isinstance(exc, StorageError):
            logger.error("storage_unavailable", extra={"path": request.url.path, "error": str(exc.cause)})
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        error = classify(exc)
        logger.exception("unhandled_error", extra={"path": request.url.path})
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.on_event("startup")
    def prepare_schema() -> None:
        if settings.AUTO_CREATE_SCHEMA:
            app.state.database.create_all()

    @app.on_event("shutdown")
    def close_database() -> None:
        app.state.database.dispose()

    @app.get("/health")
    def health() -> dict[str, str]:
        with app.state.database.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return {"status": "ok"}

    return app

