"""
Health check endpoint.

GET /health — reports whether the captcha gate is wired.
The app refuses to start without credentials, so "unhealthy" here means the
lifespan did not complete (e.g. the app is mounted without it).
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from schemas.dto.responses.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> JSONResponse:
    checks: dict[str, str] = {}
    overall = "healthy"

    if getattr(request.app.state, "gate", None) is None:
        checks["arcaptcha"] = "not_configured"
        overall = "unhealthy"
    else:
        checks["arcaptcha"] = "ok"

    status_code = 503 if overall == "unhealthy" else 200
    return JSONResponse(
        status_code=status_code,
        content=HealthResponse(status=overall, checks=checks).model_dump(),
    )
