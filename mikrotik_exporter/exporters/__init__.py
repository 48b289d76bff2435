"""
Экспорт наблюдений в формате Prometheus.
"""

from .prometheus import (
    CONTENT_TYPE_LATEST,
    DEVICE_LABELS,
    SinkCollector,
    build_families,
    build_process_registry,
    render,
    render_sink,
)

__all__ = [
    "CONTENT_TYPE_LATEST",
    "DEVICE_LABELS",
    "SinkCollector",
    "build_families",
    "build_process_registry",
    "render",
    "render_sink",
]
