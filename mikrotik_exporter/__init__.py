"""
MikroTik Exporter.

Prometheus экспортер для устройств MikroTik RouterOS через API
(порты 8728/8729).

Режимы:
- /metrics: параллельный скрейп устройств из секции devices;
- /probe?target=...&module=...: скрейп одного устройства по запросу.

Запуск:
    mikrotik-exporter --config config.yml
    python -m mikrotik_exporter --port 9436
"""

__version__ = "1.0.0"

from .prober import Prober
from .scraper import Scraper, build_static_devices, build_static_scraper

__all__ = [
    "__version__",
    "Prober",
    "Scraper",
    "build_static_devices",
    "build_static_scraper",
]
