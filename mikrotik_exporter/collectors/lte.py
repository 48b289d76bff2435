"""
Коллектор LTE модемов (/interface/lte/info).
"""

from typing import Tuple

from ..core.client import Record
from .base import MonitorCollector, Prop


class LTECollector(MonitorCollector):
    """
    Уровни сигнала LTE.

    Лейблы: cellid, primaryband (первое слово), caband (первое слово).
    """

    name = "lte"
    subsystem = "lte_interface"
    list_command = "/interface/lte/print"
    list_query = ("?disabled=false",)
    monitor_command = "/interface/lte/info"
    numbers_word = "number"
    per_entity = True
    monitor_keys = ("current-cellid", "primary-band", "ca-band")
    label_names = ("interface", "cellid", "primaryband", "caband")
    properties = (
        Prop("rssi", help="Received Signal Strength Indicator"),
        Prop("rsrp", help="Reference Signal Received Power"),
        Prop("rsrq", help="Reference Signal Received Quality"),
        Prop("sinr", help="Signal to Interference & Noise Ratio"),
    )

    def labels_for(self, name: str, record: Record) -> Tuple[str, ...]:
        return (
            name,
            record.get("current-cellid", ""),
            _first_field(record.get("primary-band", "")),
            _first_field(record.get("ca-band", "")),
        )


def _first_field(value: str) -> str:
    parts = value.split()
    return parts[0] if parts else ""
