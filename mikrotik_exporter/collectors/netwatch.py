"""
Коллектор Netwatch (/tool/netwatch/print).
"""

from ..core.domain.values import NETWATCH_STATUS, StatusRule
from .base import Prop, PropertyTableCollector


class NetwatchCollector(PropertyTableCollector):
    """
    Статус хостов Netwatch: up = 1, unknown = 0, down = -1.

    Незнакомый статус логируется как ошибка, наблюдение не создаётся.
    """

    name = "netwatch"
    subsystem = "netwatch"
    command = "/tool/netwatch/print"
    query = ("?disabled=false",)
    label_keys = ("host", "comment")
    label_names = ("host", "comment")
    properties = (
        Prop("status", rule=StatusRule(NETWATCH_STATUS), help="netwatch status (up = 1, unknown = 0, down = -1)"),
    )
