"""Health routes."""

import time

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from ... import __version__
from ..schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health_check(request: Request):
    """Проверка состояния API."""
    state = request.app.state
    return HealthResponse(
        status="ok",
        version=__version__,
        uptime=time.time() - state.started,
        devices=len(state.devices),
        modules=sorted(state.prober.modules),
    )


@router.get("/healthz", response_class=PlainTextResponse, summary="Liveness")
async def healthz() -> str:
    return "ok"
