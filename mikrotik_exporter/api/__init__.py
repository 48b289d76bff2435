"""
HTTP API экспортера (FastAPI).

Endpoints:
- GET /metrics: метрики процесса и скрейп static devices
- GET /probe?target=...&module=...: скрейп одного устройства
- GET /health, GET /healthz: проверка состояния
"""

from .main import create_app

__all__ = ["create_app"]
