"""
Коллектор количества маршрутов по версиям IP и протоколам.
"""

from ..core.context import ScrapeContext
from ..core.metrics import MetricDescriptor
from .base import BaseCollector

IP_VERSIONS = (("4", "ip"), ("6", "ipv6"))
PROTOCOLS = ("bgp", "static", "ospf", "dynamic", "connect", "rip")


class RoutesCollector(BaseCollector):
    """
    routes_total_count{ip_version} и routes_protocol_count{ip_version, protocol}.

    Считается через =count-only=, строки маршрутов не передаются.
    """

    name = "routes"
    subsystem = "routes"

    def __init__(self):
        super().__init__()
        self._descriptors["total"] = MetricDescriptor(
            subsystem=self.subsystem,
            name="total_count",
            help="number of routes in RIB",
            label_names=("ip_version",),
        )
        self._descriptors["protocol"] = MetricDescriptor(
            subsystem=self.subsystem,
            name="protocol_count",
            help="number of routes per protocol in RIB",
            label_names=("ip_version", "protocol"),
        )

    def collect(self, ctx: ScrapeContext) -> None:
        for ip_version, topic in IP_VERSIONS:
            command = f"/{topic}/route/print"
            raw = self.fetch_count(ctx, command, "?disabled=false")
            self.emit_count(ctx, "total", raw, ip_version)
            for protocol in PROTOCOLS:
                raw = self.fetch_count(ctx, command, "?disabled=false", f"?{protocol}")
                self.emit_count(ctx, "protocol", raw, ip_version, protocol)

