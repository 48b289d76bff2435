"""
Коллектор состояния ethernet портов (/interface/ethernet/monitor).
"""

from ..core.domain.values import BOOL, ETHERNET_RATE, ETHERNET_STATUS, StatusRule
from .base import MonitorCollector, Prop


class EthernetMonitorCollector(MonitorCollector):
    """
    Линк, скорость (Мбит/с) и дуплекс каждого ethernet порта.

    Неизвестная скорость и любой статус кроме link-ok дают 0.
    """

    name = "monitor"
    subsystem = "monitor"
    list_command = "/interface/ethernet/print"
    monitor_command = "/interface/ethernet/monitor"
    properties = (
        Prop("status", rule=StatusRule(ETHERNET_STATUS), help="status of the interface (link-ok = 1)"),
        Prop("rate", rule=StatusRule(ETHERNET_RATE), help="actual link rate in Mbps"),
        Prop("full-duplex", rule=BOOL, help="full duplex data transmission"),
    )
