"""
Коллектор 60 ГГц интерфейсов (/interface/w60g/monitor).
"""

from .base import MonitorCollector, Prop


class W60GCollector(MonitorCollector):
    """Радиопараметры W60G линков."""

    name = "w60g"
    subsystem = "w60ginterface"
    list_command = "/interface/w60g/print"
    monitor_command = "/interface/w60g/monitor"
    properties = (
        Prop("frequency", help="frequency of tx in MHz"),
        Prop("tx-mcs", name="txMCS", help="TX MCS"),
        Prop("tx-phy-rate", name="txPHYRate", help="PHY Rate in bps"),
        Prop("signal", help="Signal quality in %"),
        Prop("rssi", help="Signal RSSI in dB"),
        Prop("tx-sector", name="txSector", help="TX Sector"),
        Prop("distance", name="txDistance", help="Distance to remote"),
        Prop("tx-packet-error-rate", name="txPacketErrorRate", help="TX Packet Error Rate"),
    )
