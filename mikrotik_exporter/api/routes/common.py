"""Запуск синхронного скрейпа из обработчика запроса."""

import asyncio
from typing import Any, Callable

from fastapi import Request

from ...core.connection import CancelToken
from ...core.logging import get_logger

logger = get_logger(__name__)

# Интервал проверки отключения клиента (секунды)
DISCONNECT_POLL_INTERVAL = 0.5


async def run_scrape(request: Request, token: CancelToken, func: Callable, *args) -> Any:
    """
    Запускает синхронную функцию в executor.

    Пока функция выполняется, отключение клиента проверяется каждые
    DISCONNECT_POLL_INTERVAL секунд; при отключении token отменяется
    и открытые сессии прерываются. Токен доступен lifespan для отмены
    при остановке сервера.

    Args:
        request: Запрос
        token: Сигнал отмены скрейпа
        func: Синхронная функция скрейпа
        *args: Аргументы func

    Returns:
        Any: Результат func
    """
    tokens = request.app.state.tokens
    tokens.add(token)
    loop = asyncio.get_running_loop()
    future = loop.run_in_executor(None, func, *args)
    try:
        while True:
            done, _ = await asyncio.wait({future}, timeout=DISCONNECT_POLL_INTERVAL)
            if done:
                return future.result()
            if await request.is_disconnected():
                logger.info(f"Клиент отключился, скрейп {request.url.path} отменён")
                token.cancel()
                return await future
    finally:
        tokens.discard(token)
