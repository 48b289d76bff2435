"""
MikroTik Exporter Web API.

Приложение собирается фабрикой create_app() из валидированной
конфигурации. Состояние (реестр процесса, scraper static devices,
prober) хранится в app.state.

Запуск:
    mikrotik-exporter --config config.yml

Prometheus:
    scrape_configs:
      - job_name: mikrotik
        metrics_path: /probe
        params: {module: [default]}
        static_configs: [{targets: ["10.0.0.1", "10.0.0.2:8729"]}]
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..core.config_schema import AppConfig
from ..core.connection import ClientFactory
from ..core.credentials import CredentialsManager
from ..core.logging import get_logger
from ..exporters import build_process_registry
from ..prober import Prober
from ..scraper import build_static_devices, build_static_scraper
from .schemas import ErrorResponse
from .routes import health_router, metrics_router, probe_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle events."""
    # Startup
    logger.info(
        f"MikroTik Exporter v{__version__} запущен: "
        f"{len(app.state.devices)} static devices, "
        f"модули /probe: {', '.join(sorted(app.state.prober.modules))}"
    )
    yield
    # Shutdown
    active = list(app.state.tokens)
    if active:
        logger.info(f"Остановка: отмена {len(active)} активных скрейпов")
    for token in active:
        token.cancel()
    logger.info("MikroTik Exporter остановлен")


def create_app(
    config: Optional[AppConfig] = None,
    client_factory: Optional[ClientFactory] = None,
    credentials_manager: Optional[CredentialsManager] = None,
) -> FastAPI:
    """
    Создаёт приложение FastAPI.

    Args:
        config: Валидированная конфигурация (по умолчанию пустая)
        client_factory: Фабрика клиента RouterOS (в тестах подменяется)
        credentials_manager: Учётные данные по умолчанию

    Returns:
        FastAPI: Приложение

    Raises:
        ConfigError: Не загружается CA сертификат
    """
    config = config or AppConfig()
    credentials_manager = credentials_manager or CredentialsManager()

    app = FastAPI(
        title="MikroTik Exporter",
        description="Prometheus экспортер для MikroTik RouterOS API",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
    )

    app.state.config = config
    app.state.started = time.time()
    app.state.registry = build_process_registry()
    app.state.scraper = build_static_scraper(config, client_factory=client_factory)
    app.state.devices = build_static_devices(config, credentials_manager)
    app.state.prober = Prober.from_config(
        config,
        credentials_manager=credentials_manager,
        client_factory=client_factory,
    )
    app.state.tokens = set()

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Глобальный обработчик ошибок."""
        logger.error(f"Ошибка обработки {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Internal Server Error",
                detail=str(exc),
            ).model_dump(),
        )

    app.include_router(metrics_router, tags=["Metrics"])
    app.include_router(probe_router, tags=["Probe"])
    app.include_router(health_router, tags=["Health"])
    return app
