"""
Коллектор SFP модулей (DDM через /interface/ethernet/monitor).
"""

from ..core.domain.values import BOOL_INVERTED
from .base import MonitorCollector, Prop


class OpticsCollector(MonitorCollector):
    """
    Уровни сигнала, температура, напряжение и ток смещения SFP.

    Опрашиваются только интерфейсы с именем на "sfp".
    rx_status/tx_status = 1 когда нет rx-loss / tx-fault.
    """

    name = "optics"
    subsystem = "optics"
    list_command = "/interface/ethernet/print"
    monitor_command = "/interface/ethernet/monitor"
    properties = (
        Prop("sfp-rx-loss", rule=BOOL_INVERTED, name="rx_status", help="RX status"),
        Prop("sfp-tx-fault", rule=BOOL_INVERTED, name="tx_status", help="TX status"),
        Prop("sfp-temperature", name="temperature_celsius", help="temperature in degree celsius"),
        Prop("sfp-supply-voltage", name="voltage_volt", help="Supply voltage in volt"),
        Prop("sfp-tx-bias-current", name="tx_bias_ma", help="bias is milliamps"),
        Prop("sfp-tx-power", name="tx_power_dbm", help="TX power in dBM"),
        Prop("sfp-rx-power", name="rx_power_dbm", help="RX power in dBM"),
    )

    def accept_name(self, name: str) -> bool:
        return name.startswith("sfp")
