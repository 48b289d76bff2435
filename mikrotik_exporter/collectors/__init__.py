"""
Коллекторы метрик RouterOS и реестр.

Реестр строится один раз из флагов features. Порядок коллекторов
фиксирован (COLLECTORS) и не меняется во время работы.

Пример использования:
    from mikrotik_exporter.collectors import build_collectors

    collectors = build_collectors({"bgp": True, "routes": True})
    [c.name for c in collectors]  # ['interface', 'resource', 'bgp', 'routes']
"""

from typing import Any, Dict, List, Mapping, Tuple, Type, Union

from .base import BaseCollector, MonitorCollector, Prop, PropertyTableCollector
from .bgp import BGPCollector
from .conntrack import ConntrackCollector
from .dhcp import DHCPCollector, DHCPLeaseCollector, DHCPv6Collector
from .firmware import FirmwareCollector
from .health import HealthCollector
from .interface import InterfaceCollector
from .ipsec import IPsecCollector
from .lte import LTECollector
from .monitor import EthernetMonitorCollector
from .netwatch import NetwatchCollector
from .optics import OpticsCollector
from .poe import POECollector
from .pool import PoolCollector
from .resource import ResourceCollector
from .routes import RoutesCollector
from .w60g import W60GCollector
from .wireless import CapsmanCollector, WlanIFCollector, WlanSTACollector

# Порядок включения: (флаг features, класс коллектора)
COLLECTORS: Tuple[Tuple[str, Type[BaseCollector]], ...] = (
    ("interface", InterfaceCollector),
    ("resource", ResourceCollector),
    ("bgp", BGPCollector),
    ("conntrack", ConntrackCollector),
    ("dhcp", DHCPCollector),
    ("dhcpl", DHCPLeaseCollector),
    ("dhcpv6", DHCPv6Collector),
    ("firmware", FirmwareCollector),
    ("health", HealthCollector),
    ("routes", RoutesCollector),
    ("poe", POECollector),
    ("pools", PoolCollector),
    ("optics", OpticsCollector),
    ("w60g", W60GCollector),
    ("wlansta", WlanSTACollector),
    ("capsman", CapsmanCollector),
    ("wlanif", WlanIFCollector),
    ("monitor", EthernetMonitorCollector),
    ("ipsec", IPsecCollector),
    ("lte", LTECollector),
    ("netwatch", NetwatchCollector),
)

# Коллекторы, включённые если флаг не указан
DEFAULT_ENABLED = ("interface", "resource")

FEATURE_NAMES = tuple(name for name, _ in COLLECTORS)


def build_collectors(features: Union[Mapping[str, bool], Any, None] = None) -> List[BaseCollector]:
    """
    Создаёт упорядоченный список коллекторов по флагам.

    Args:
        features: dict флагов или объект с атрибутами-флагами (Features)

    Returns:
        List[BaseCollector]: Коллекторы в порядке COLLECTORS

    Example:
        build_collectors({"resource": False, "netwatch": True})
    """
    flags = _as_flags(features)
    return [
        collector_cls()
        for name, collector_cls in COLLECTORS
        if flags.get(name, name in DEFAULT_ENABLED)
    ]


def _as_flags(features: Union[Mapping[str, bool], Any, None]) -> Dict[str, bool]:
    if features is None:
        return {}
    if isinstance(features, Mapping):
        return dict(features)
    return {name: bool(getattr(features, name)) for name in FEATURE_NAMES if hasattr(features, name)}


__all__ = [
    "BaseCollector",
    "PropertyTableCollector",
    "MonitorCollector",
    "Prop",
    "COLLECTORS",
    "DEFAULT_ENABLED",
    "FEATURE_NAMES",
    "build_collectors",
    "InterfaceCollector",
    "ResourceCollector",
    "BGPCollector",
    "ConntrackCollector",
    "DHCPCollector",
    "DHCPLeaseCollector",
    "DHCPv6Collector",
    "FirmwareCollector",
    "HealthCollector",
    "RoutesCollector",
    "POECollector",
    "PoolCollector",
    "OpticsCollector",
    "W60GCollector",
    "WlanSTACollector",
    "CapsmanCollector",
    "WlanIFCollector",
    "EthernetMonitorCollector",
    "IPsecCollector",
    "LTECollector",
    "NetwatchCollector",
]
