"""
Коллектор PoE выходов (/interface/ethernet/poe).
"""

from .base import MonitorCollector, Prop


class POECollector(MonitorCollector):
    """Ток, напряжение и мощность на PoE портах."""

    name = "poe"
    subsystem = "poe"
    list_command = "/interface/ethernet/poe/print"
    monitor_command = "/interface/ethernet/poe/monitor"
    properties = (
        Prop("poe-out-current", name="current", help="current"),
        Prop("poe-out-voltage", name="voltage", help="voltage"),
        Prop("poe-out-power", name="wattage", help="wattage"),
    )
