"""
Экспорт наблюдений в формате Prometheus (prometheus_client).

Глобальный REGISTRY не используется: реестр процесса создаётся явно
при старте (build_process_registry) и передаётся в API. Наблюдения
скрейпа рендерятся из отдельного реестра на каждый запрос.

В static режиме к лейблам каждой метрики спереди добавляются device
(имя) и device_address устройства. В режиме /probe устройство одно, его
идентифицирует сам Prometheus (instance), лейблы не добавляются.

Пример использования:
    body = render(process_registry) + render_sink(sink, scraper.describe())
"""

from typing import Dict, Iterable, Iterator, List, Sequence

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    GCCollector,
    Info,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric

from .. import __version__
from ..core.metrics import MetricDescriptor, ObservationSink, ValueKind

DEVICE_LABELS = ("device", "device_address")


def _new_family(descriptor: MetricDescriptor, device_labels: bool) -> Metric:
    """
    Raises:
        ValueError: Лейбл описания совпадает с лейблом устройства
    """
    labels = list(descriptor.label_names)
    if device_labels:
        clash = set(DEVICE_LABELS) & set(labels)
        if clash:
            raise ValueError(
                f"{descriptor.fq_name}: лейблы {sorted(clash)} зарезервированы для устройства"
            )
        labels = list(DEVICE_LABELS) + labels
    if descriptor.kind == ValueKind.COUNTER:
        return CounterMetricFamily(descriptor.fq_name, descriptor.help, labels=labels)
    return GaugeMetricFamily(descriptor.fq_name, descriptor.help, labels=labels)


def build_families(
    sink: ObservationSink,
    descriptors: Sequence[MetricDescriptor] = (),
    device_labels: bool = False,
) -> List[Metric]:
    """
    Группирует наблюдения по семействам метрик.

    Порядок семейств: сначала descriptors, затем неизвестные описания
    в порядке появления. Семейства без наблюдений не возвращаются.

    Args:
        sink: Буфер наблюдений
        descriptors: Описания в порядке вывода
        device_labels: Добавлять лейблы device и device_address

    Returns:
        List[Metric]: Семейства prometheus_client
    """
    families: Dict[MetricDescriptor, Metric] = {}
    for descriptor in descriptors:
        families.setdefault(descriptor, _new_family(descriptor, device_labels))

    for device, observation in sink.items():
        descriptor = observation.descriptor
        family = families.get(descriptor)
        if family is None:
            family = families[descriptor] = _new_family(descriptor, device_labels)
        labels = list(observation.label_values)
        if device_labels:
            name = device.display_name if device else ""
            address = device.address if device else ""
            labels = [name, address] + labels
        family.add_metric(labels, observation.value)

    return [family for family in families.values() if family.samples]


class SinkCollector:
    """
    Custom collector prometheus_client поверх готового буфера наблюдений.

    describe() отдаёт пустые семейства для всех описаний, чтобы
    CollectorRegistry мог проверить уникальность имён.
    """

    def __init__(
        self,
        sink: ObservationSink,
        descriptors: Sequence[MetricDescriptor] = (),
        device_labels: bool = False,
    ):
        self._sink = sink
        self._descriptors = list(dict.fromkeys(descriptors))
        self._device_labels = device_labels

    def describe(self) -> Iterator[Metric]:
        for descriptor in self._descriptors:
            yield _new_family(descriptor, self._device_labels)

    def collect(self) -> Iterator[Metric]:
        yield from build_families(self._sink, self._descriptors, self._device_labels)


def build_process_registry() -> CollectorRegistry:
    """Реестр с метриками процесса, платформы, GC и build info экспортера."""
    registry = CollectorRegistry()
    build_info = Info(
        "mikrotik_exporter_build",
        "A metric with a constant '1' value labeled by version of mikrotik_exporter",
        registry=registry,
    )
    build_info.info({"version": __version__})
    ProcessCollector(registry=registry)
    PlatformCollector(registry=registry)
    GCCollector(registry=registry)
    return registry


def render(registry: CollectorRegistry) -> bytes:
    """Текстовый формат Prometheus."""
    return generate_latest(registry)


def render_sink(
    sink: ObservationSink,
    descriptors: Iterable[MetricDescriptor] = (),
    device_labels: bool = False,
) -> bytes:
    """Рендер наблюдений одного запроса через отдельный реестр."""
    registry = CollectorRegistry()
    registry.register(SinkCollector(sink, list(descriptors), device_labels))
    return render(registry)
