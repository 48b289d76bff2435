"""
Коллектор таблицы connection tracking.
"""

from .base import Prop, PropertyTableCollector


class ConntrackCollector(PropertyTableCollector):
    """Число отслеживаемых соединений и размер таблицы."""

    name = "conntrack"
    subsystem = "conntrack"
    command = "/ip/firewall/connection/tracking/print"
    properties = (
        Prop("total-entries", name="entries", help="Number of tracked connections"),
        Prop("max-entries", name="max_entries", help="Conntrack table capacity"),
    )
