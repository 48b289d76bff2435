"""
Коллектор занятости IP пулов (/ip/pool и /ipv6/pool).
"""

from ..core.context import ScrapeContext
from ..core.metrics import MetricDescriptor
from .base import BaseCollector

IP_VERSIONS = (("4", "ip"), ("6", "ipv6"))


class PoolCollector(BaseCollector):
    """Число занятых адресов в каждом пуле."""

    name = "pools"
    subsystem = "ip_pool"

    def __init__(self):
        super().__init__()
        self._descriptors["pool_used_count"] = MetricDescriptor(
            subsystem=self.subsystem,
            name="pool_used_count",
            help="number of used IP/prefixes in a pool",
            label_names=("ip_version", "pool"),
        )

    def collect(self, ctx: ScrapeContext) -> None:
        for ip_version, topic in IP_VERSIONS:
            for pool in self.fetch_names(ctx, f"/{topic}/pool/print"):
                raw = self.fetch_count(ctx, f"/{topic}/pool/used/print", f"?pool={pool}")
                self.emit_count(ctx, "pool_used_count", raw, ip_version, pool)
