"""Translate domain and storage errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from ..errors import QuizError, StoreUnavailable

logger = logging.getLogger(__name__)


async def quiz_error_handler(request: Request, exc: QuizError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s -> %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


async def operational_error_handler(
    request: Request, exc: OperationalError
) -> JSONResponse:
    logger.error("database unavailable on %s: %s", request.url.path, exc)
    error = StoreUnavailable("Database is unavailable")
    return JSONResponse(error.to_dict(), status_code=error.status_code)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(QuizError, quiz_error_handler)
    app.add_exception_handler(OperationalError, operational_error_handler)


__all__ = ["register_error_handlers"]
