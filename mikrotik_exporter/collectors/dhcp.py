"""
Коллекторы DHCP: активные аренды по серверам, детали аренд, DHCPv6 привязки.
"""

import json

from ..core.context import ScrapeContext
from ..core.domain.values import parse_duration
from ..core.exceptions import ValueParseError
from ..core.metrics import MetricDescriptor
from .base import BaseCollector, proplist


class DHCPCollector(BaseCollector):
    """Число активных аренд на каждом DHCP сервере."""

    name = "dhcp"
    subsystem = "dhcp"

    def __init__(self):
        super().__init__()
        self._descriptors["leases_active_count"] = MetricDescriptor(
            subsystem=self.subsystem,
            name="leases_active_count",
            help="number of active leases per DHCP server",
            label_names=("server",),
        )

    def collect(self, ctx: ScrapeContext) -> None:
        for server in self.fetch_names(ctx, "/ip/dhcp-server/print"):
            raw = self.fetch_count(
                ctx,
                "/ip/dhcp-server/lease/print",
                f"?server={server}",
                "=active=",
            )
            self.emit_count(ctx, "leases_active_count", raw, server)


LEASE_PROPS = (
    "active-mac-address",
    "server",
    "status",
    "expires-after",
    "active-address",
    "host-name",
)


class DHCPLeaseCollector(BaseCollector):
    """
    Информационная метрика по каждой bound аренде (значение всегда 1).

    expires-after переводится в секунды, host-name экранируется в ASCII.
    """

    name = "dhcpl"
    subsystem = "dhcp"

    def __init__(self):
        super().__init__()
        self._descriptors["leases_metrics"] = MetricDescriptor(
            subsystem=self.subsystem,
            name="leases_metrics",
            help="number of metrics",
            label_names=(
                "activemacaddress",
                "server",
                "status",
                "expiresafter",
                "activeaddress",
                "hostname",
            ),
        )

    def collect(self, ctx: ScrapeContext) -> None:
        reply = ctx.run(
            "/ip/dhcp-server/lease/print",
            "?status=bound",
            proplist(LEASE_PROPS),
        )
        descriptor = self.descriptor("leases_metrics")
        for record in reply.rows:
            raw_expires = record.get("expires-after", "")
            try:
                expires = parse_duration(raw_expires)
            except ValueParseError as e:
                self._log_parse_error(ctx, "expires-after", raw_expires, e)
                continue
            ctx.emit(
                descriptor,
                1.0,
                record.get("active-mac-address", ""),
                record.get("server", ""),
                record.get("status", ""),
                str(expires),
                record.get("active-address", ""),
                json.dumps(record.get("host-name", "")),
            )


class DHCPv6Collector(BaseCollector):
    """Число DHCPv6 привязок на каждом сервере."""

    name = "dhcpv6"
    subsystem = "dhcpv6"

    def __init__(self):
        super().__init__()
        self._descriptors["binding_count"] = MetricDescriptor(
            subsystem=self.subsystem,
            name="binding_count",
            help="number of active bindings per DHCPv6 server",
            label_names=("server",),
        )

    def collect(self, ctx: ScrapeContext) -> None:
        for server in self.fetch_names(ctx, "/ipv6/dhcp-server/print"):
            raw = self.fetch_count(
                ctx,
                "/ipv6/dhcp-server/binding/print",
                f"?server={server}",
            )
            self.emit_count(ctx, "binding_count", raw, server)
