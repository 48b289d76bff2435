"""
Контекст скрейпа и отмена.

ScrapeContext передаётся в каждый вызов Collector.collect():
буфер наблюдений, сессия, устройство и логгер с привязанными полями.

CancelToken (из core/connection.py) реэкспортируется здесь же: он
живёт в пределах одного HTTP запроса и прерывает открытые сессии.

Пример использования:
    token = CancelToken()
    ctx = ScrapeContext(sink=sink, session=session, device=device, logger=log)
    reply = ctx.run("/system/resource/print")
    ctx.emit(descriptor, 42.0, "RB4011", "7.12")
"""

from dataclasses import dataclass

from .client import Reply
from .connection import CancelToken, Session
from .device import DeviceTarget
from .logging import StructuredLogger
from .metrics import MetricDescriptor, Observation, ObservationSink

__all__ = ["CancelToken", "ScrapeContext"]


@dataclass
class ScrapeContext:
    """
    Контекст одного скрейпа одного устройства.

    Attributes:
        sink: Буфер наблюдений
        session: Сессия с устройством (только для этого потока)
        device: Устройство
        logger: Логгер с полями device, ip
    """
    sink: ObservationSink
    session: Session
    device: DeviceTarget
    logger: StructuredLogger

    def run(self, command: str, *words: str) -> Reply:
        """Запрос к устройству. Ошибки прерывают скрейп."""
        return self.session.run(command, *words)

    def emit(self, descriptor: MetricDescriptor, value: float, *label_values: str) -> None:
        """Добавляет наблюдение в буфер."""
        self.sink.emit(
            Observation(descriptor, float(value), tuple(label_values)),
            self.device,
        )
