"""
Модель метрик: описания, наблюдения, потокобезопасный буфер.

MetricDescriptor создаётся один раз при создании коллектора и дальше
только читается. Observation проверяет, что число лейблов совпадает
с описанием. ObservationSink — единственный общий изменяемый ресурс
между потоками скрейпа.

Пример использования:
    desc = MetricDescriptor("interface", "rx_byte", "rx-byte", ("interface",), ValueKind.COUNTER)
    sink = ObservationSink()
    sink.emit(Observation(desc, 1024.0, ("ether1",)), device)
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .device import DeviceTarget

NAMESPACE = "mikrotik"


class ValueKind(str, Enum):
    """Тип значения метрики."""
    GAUGE = "gauge"
    COUNTER = "counter"


@dataclass(frozen=True)
class MetricDescriptor:
    """
    Описание семейства метрик.

    Attributes:
        subsystem: Подсистема (interface, bgp, ...)
        name: Имя метрики внутри подсистемы
        help: Текст HELP
        label_names: Имена лейблов по порядку
        kind: gauge или counter
        namespace: Пространство имён (mikrotik)
    """
    subsystem: str
    name: str
    help: str
    label_names: Tuple[str, ...] = ()
    kind: ValueKind = ValueKind.GAUGE
    namespace: str = NAMESPACE

    @property
    def fq_name(self) -> str:
        """Полное имя: namespace_subsystem_name (пустые части пропускаются)."""
        return "_".join(part for part in (self.namespace, self.subsystem, self.name) if part)

    @property
    def arity(self) -> int:
        return len(self.label_names)


@dataclass(frozen=True)
class Observation:
    """
    Одно значение метрики с лейблами.

    Raises:
        ValueError: Число лейблов не совпадает с описанием
    """
    descriptor: MetricDescriptor
    value: float
    label_values: Tuple[str, ...] = ()

    def __post_init__(self):
        if len(self.label_values) != self.descriptor.arity:
            raise ValueError(
                f"{self.descriptor.fq_name}: ожидалось {self.descriptor.arity} "
                f"лейблов, получено {len(self.label_values)}"
            )


class ObservationSink:
    """
    Буфер наблюдений, общий для параллельных скрейпов.

    Хранит пары (устройство, наблюдение) в порядке поступления.
    """

    def __init__(self):
        self._items: List[Tuple[Optional[DeviceTarget], Observation]] = []
        self._lock = threading.Lock()

    def emit(self, observation: Observation, device: Optional[DeviceTarget] = None) -> None:
        with self._lock:
            self._items.append((device, observation))

    def items(self) -> List[Tuple[Optional[DeviceTarget], Observation]]:
        """Снимок содержимого."""
        with self._lock:
            return list(self._items)

    def observations(self) -> List[Observation]:
        with self._lock:
            return [observation for _, observation in self._items]

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


def metric_name(property_name: str) -> str:
    """rx-byte -> rx_byte"""
    return property_name.replace("-", "_")
