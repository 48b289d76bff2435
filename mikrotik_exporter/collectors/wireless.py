"""
Коллекторы беспроводных интерфейсов: клиенты (wlansta), точки (wlanif), CAPsMAN.

Значения вида "-62@HT20" обрезаются по "@", пары "tx,rx" разбиваются
на метрики tx_* и rx_*.
"""

from typing import Tuple

from ..core.client import Record
from ..core.domain.values import DURATION, NUMBER_AT
from .base import MonitorCollector, Prop, PropertyTableCollector


class WlanSTACollector(PropertyTableCollector):
    """Клиенты в таблице регистрации wireless."""

    name = "wlansta"
    subsystem = "wlan_station"
    command = "/interface/wireless/registration-table/print"
    label_keys = ("interface", "mac-address")
    label_names = ("interface", "mac_address")
    properties = (
        Prop("signal-to-noise", rule=NUMBER_AT),
        Prop("signal-strength", rule=NUMBER_AT),
    )
    dual_counters = ("packets", "bytes", "frames")


class WlanIFCollector(MonitorCollector):
    """Клиенты, шум и CCQ на включённых wireless интерфейсах."""

    name = "wlanif"
    subsystem = "wlan_interface"
    list_command = "/interface/wireless/print"
    list_query = ("?disabled=false",)
    monitor_command = "/interface/wireless/monitor"
    per_entity = True
    monitor_keys = ("channel",)
    label_names = ("interface", "channel")
    properties = (
        Prop("registered-clients"),
        Prop("noise-floor"),
        Prop("overall-tx-ccq"),
    )

    def labels_for(self, name: str, record: Record) -> Tuple[str, ...]:
        return name, record.get("channel", "")


class CapsmanCollector(PropertyTableCollector):
    """Клиенты в таблице регистрации CAPsMAN."""

    name = "capsman"
    subsystem = "capsman_clients"
    command = "/caps-man/registration-table/print"
    label_keys = ("interface", "mac-address", "ssid")
    label_names = ("interface", "mac_address", "ssid")
    properties = (
        Prop("uptime", rule=DURATION, name="uptime_seconds", help="client uptime in seconds"),
        Prop("tx-signal", rule=NUMBER_AT),
        Prop("rx-signal", rule=NUMBER_AT),
    )
    dual_counters = ("packets", "bytes")
