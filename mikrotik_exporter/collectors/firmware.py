"""
Коллектор установленных пакетов RouterOS (/system/package/getall).
"""

from ..core.context import ScrapeContext
from ..core.metrics import MetricDescriptor
from .base import BaseCollector

LABEL_NAMES = ("name", "disabled", "version", "build_time")


class FirmwareCollector(BaseCollector):
    """
    Информационная метрика по пакетам: 1 для активного пакета, 0 для отключённого.
    """

    name = "firmware"
    label_names = LABEL_NAMES

    def __init__(self):
        super().__init__()
        self._descriptors["package"] = MetricDescriptor(
            subsystem="system",
            name="package",
            help="system packages version",
            label_names=LABEL_NAMES,
        )

    def collect(self, ctx: ScrapeContext) -> None:
        reply = ctx.run("/system/package/getall")
        descriptor = self.descriptor("package")
        for record in reply.rows:
            disabled = record.get("disabled", "")
            value = 0.0 if disabled.lower() == "true" else 1.0
            ctx.emit(
                descriptor,
                value,
                record.get("name", ""),
                disabled,
                record.get("version", ""),
                record.get("build-time", ""),
            )
