"""Metrics route: метрики процесса и static devices."""

from fastapi import APIRouter, Request, Response

from ...core.connection import CancelToken
from ...core.metrics import ObservationSink
from ...exporters import CONTENT_TYPE_LATEST, render, render_sink
from .common import run_scrape

router = APIRouter()


@router.get("/metrics", summary="Метрики static devices")
async def metrics(request: Request) -> Response:
    """
    Один проход скрейпа по всем устройствам из секции devices.

    Каждая метрика устройства получает лейблы device и device_address.
    """
    state = request.app.state
    sink = ObservationSink()
    if state.devices:
        token = CancelToken()
        await run_scrape(request, token, state.scraper.scrape_all, state.devices, sink, token)

    body = render(state.registry) + render_sink(sink, state.scraper.describe(), device_labels=True)
    return Response(content=body, media_type=CONTENT_TYPE_LATEST)
