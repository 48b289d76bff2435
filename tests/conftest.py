"""
Pytest configuration и общие fixtures для тестов.

Предоставляет переиспользуемые fixtures:
- device: Тестовое устройство
- make_context: ScrapeContext поверх фейкового клиента

Фейковый клиент и хелперы лежат в fakes.py.
"""

from typing import Any, Dict, Optional

import pytest

from mikrotik_exporter.core.connection import Session
from mikrotik_exporter.core.context import ScrapeContext
from mikrotik_exporter.core.device import DeviceTarget
from mikrotik_exporter.core.logging import get_logger
from mikrotik_exporter.core.metrics import ObservationSink

from fakes import FakeRouterOSClient, make_device


@pytest.fixture
def device() -> DeviceTarget:
    """Тестовое устройство с учётными данными."""
    return make_device()


@pytest.fixture
def make_context(device):
    """
    Фабрика ScrapeContext поверх FakeRouterOSClient.

    Usage:
        ctx, client = make_context({"/interface/print": reply(...)})
        InterfaceCollector().collect(ctx)
    """
    def _make(responses: Optional[Dict[Any, Any]] = None):
        client = FakeRouterOSClient(responses)
        ctx = ScrapeContext(
            sink=ObservationSink(),
            session=Session(client, device),
            device=device,
            logger=get_logger("tests").bind(device=device.name, ip=device.address),
        )
        return ctx, client
    return _make


def pytest_configure(config):
    """Регистрация custom markers для pytest."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (быстрые, без внешних зависимостей)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (несколько слоёв вместе)"
    )
    config.addinivalue_line(
        "markers", "slow: Медленные тесты"
    )
