"""
Коллектор системных ресурсов (/system/resource/print).
"""

from ..core.domain.values import DURATION
from ..core.metrics import ValueKind
from .base import Prop, PropertyTableCollector


class ResourceCollector(PropertyTableCollector):
    """Память, CPU, диск и uptime. Лейблы: модель платы и версия RouterOS."""

    name = "resource"
    subsystem = "system"
    command = "/system/resource/print"
    label_keys = ("board-name", "version")
    label_names = ("boardname", "version")
    properties = (
        Prop("free-memory"),
        Prop("total-memory"),
        Prop("cpu-load"),
        Prop("free-hdd-space"),
        Prop("total-hdd-space"),
        Prop("uptime", rule=DURATION, kind=ValueKind.COUNTER),
    )
