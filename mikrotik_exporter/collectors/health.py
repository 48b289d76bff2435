"""
Коллектор датчиков (/system/health/print).

RouterOS 6 отдаёт одну строку с колонками voltage, temperature,
cpu-temperature. RouterOS 7 отдаёт по строке на датчик: name + value.
Оба формата приводятся к одним и тем же метрикам.
"""

from ..core.context import ScrapeContext
from .base import Prop, BaseCollector


class HealthCollector(BaseCollector):
    """Напряжение питания и температуры."""

    name = "health"
    subsystem = "health"
    properties = (
        Prop("voltage", help="Input voltage to the RouterOS board, in volts"),
        Prop("temperature", help="Temperature of RouterOS board, in degrees Celsius"),
        Prop("cpu-temperature", help="Temperature of RouterOS CPU, in degrees Celsius"),
    )

    def collect(self, ctx: ScrapeContext) -> None:
        reply = ctx.run("/system/health/print")
        known = {prop.key: prop for prop in self.properties}
        for record in reply.rows:
            sensor = record.get("name")
            if sensor is None:
                self.collect_record(ctx, record, ())
                continue
            prop = known.get(sensor)
            if prop is None:
                ctx.logger.debug(f"Пропущен датчик {sensor}", collector=self.name)
                continue
            self.collect_property(ctx, prop, record.get("value", ""), ())
