"""FastAPI application factory and configuration."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .api import register_routes
from .core import (
    ALLOWED_CORS_ORIGINS,
    DATABASE_URL,
    DB_RESET,
    create_db_engine,
    init_db,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(app.state.engine, reset=app.state.db_reset)
    app.state.ready = True
    logger.info("database ready")
    try:
        yield
    finally:
        app.state.ready = False
        app.state.engine.dispose()
        logger.info("database connections closed")


def create_app(
    database_url: Optional[str] = None, *, db_reset: Optional[bool] = None
) -> FastAPI:
    app = FastAPI(title="CryptoQuest Backend API", version="1.0.0", lifespan=lifespan)

    app.state.engine = create_db_engine(database_url or DATABASE_URL)
    app.state.db_reset = DB_RESET if db_reset is None else db_reset
    app.state.ready = False

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    register_routes(app)
    return app


app = create_app()


__all__ = ["app", "create_app"]
