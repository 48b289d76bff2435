"""Probe route: скрейп одного устройства по запросу."""

from typing import Optional

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse

from ...core.connection import CancelToken
from ...core.exceptions import RequestConfigurationError
from ...core.logging import get_logger
from ...exporters import CONTENT_TYPE_LATEST, render_sink
from .common import run_scrape

logger = get_logger(__name__)

router = APIRouter()


@router.get("/probe", summary="Скрейп одного устройства")
async def probe(
    request: Request,
    target: Optional[str] = None,
    module: Optional[str] = None,
) -> Response:
    """
    Скрейп target с настройками module.

    Параметры проверяются до подключения: без target, с неизвестным
    module или с некорректным target ответ 400.
    """
    prober = request.app.state.prober
    try:
        probe_module, device = prober.resolve(target, module)
    except RequestConfigurationError as e:
        logger.warning(f"/probe отклонён: {e.message}", target=target, probe_module=module)
        return PlainTextResponse(e.message, status_code=400)

    token = CancelToken()
    sink = await run_scrape(request, token, prober.probe, target, probe_module.name, token)
    body = render_sink(sink, probe_module.scraper.describe())
    return Response(content=body, media_type=CONTENT_TYPE_LATEST)
