"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ...core import isoformat, utcnow

router = APIRouter(tags=["system"])

ENDPOINTS = [
    "POST /api/users",
    "GET /api/users/{walletAddress}",
    "PATCH /api/users/{walletAddress}",
    "GET /api/users/{walletAddress}/history",
    "GET /api/users/{walletAddress}/stats",
    "POST /api/users/{walletAddress}/reconcile",
    "POST /api/scores",
    "GET /api/leaderboard",
]


@router.get("/")
def index(request: Request) -> Dict[str, Any]:
    """Describe the service and its endpoints."""

    return {
        "message": "CryptoQuest Backend API",
        "version": request.app.version,
        "endpoints": ENDPOINTS,
    }


@router.get("/health")
def health() -> Dict[str, Any]:
    """Liveness probe."""

    return {"ok": True, "timestamp": isoformat(utcnow())}


@router.get("/healthz")
def healthz(request: Request) -> JSONResponse:
    """Readiness probe: 503 until the database has been initialised."""

    ready = bool(getattr(request.app.state, "ready", False))
    return JSONResponse({"ok": ready}, status_code=200 if ready else 503)


__all__ = ["router"]
