"""
Оркестратор скрейпа.

Scraper выполняет:
- скрейп одного устройства: сессия -> коллекторы по очереди -> закрытие;
- параллельный скрейп списка устройств (поток на устройство).

После каждого скрейпа в буфер пишутся две мета-метрики:
длительность и успех (1 если ни один коллектор не упал). Они пишутся
и при ошибке, поэтому недоступное устройство даёт success=0, а не 500.

Пример использования:
    scraper = Scraper(build_collectors(features), timeout=5)
    sink = ObservationSink()
    scraper.scrape_all(devices, sink)
"""

import time
from dataclasses import replace
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Sequence

from .collectors import build_collectors
from .collectors.base import BaseCollector
from .core.config_schema import AppConfig
from .core.connection import DEFAULT_TIMEOUT, CancelToken, ClientFactory, SessionManager
from .core.credentials import CredentialsManager
from .core.context import ScrapeContext
from .core.device import DeviceTarget, TLSSettings
from .core.exceptions import CollectorError, format_error_for_log
from .core.logging import StructuredLogger, get_logger
from .core.metrics import MetricDescriptor, Observation, ObservationSink

logger = get_logger(__name__)

SCRAPE_DURATION = MetricDescriptor(
    subsystem="scrape",
    name="collector_duration_seconds",
    help="mikrotik_exporter: duration of a device collector scrape",
)
SCRAPE_SUCCESS = MetricDescriptor(
    subsystem="scrape",
    name="collector_success",
    help="mikrotik_exporter: whether a device collector succeeded",
)


class Scraper:
    """
    Скрейп устройств набором коллекторов.

    Attributes:
        collectors: Коллекторы в порядке выполнения
        timeout: Дедлайн скрейпа одного устройства (секунды)
        max_workers: Максимум параллельных скрейпов (None = по потоку на устройство)
        session_manager: Менеджер сессий

    Example:
        scraper = Scraper([InterfaceCollector()], timeout=5)
        ok = scraper.scrape_device(device, sink)
    """

    def __init__(
        self,
        collectors: Sequence[BaseCollector],
        timeout: float = DEFAULT_TIMEOUT,
        max_workers: Optional[int] = None,
        session_manager: Optional[SessionManager] = None,
    ):
        self.collectors = list(collectors)
        self.timeout = timeout
        self.max_workers = max_workers
        self.session_manager = session_manager or SessionManager(timeout=timeout)

    def describe(self) -> List[MetricDescriptor]:
        """Мета-метрики и метрики всех коллекторов."""
        descriptors = [SCRAPE_DURATION, SCRAPE_SUCCESS]
        for collector in self.collectors:
            descriptors.extend(collector.describe())
        return descriptors

    def scrape_device(
        self,
        device: DeviceTarget,
        sink: ObservationSink,
        token: Optional[CancelToken] = None,
    ) -> bool:
        """
        Скрейп одного устройства.

        Ошибки не пробрасываются: результат отражается в мета-метриках
        и в логе.

        Args:
            device: Устройство
            sink: Буфер наблюдений
            token: Сигнал отмены

        Returns:
            bool: True если все коллекторы отработали
        """
        log = logger.bind(device=device.display_name, ip=device.address)
        begin = time.monotonic()
        success = False
        try:
            self._run_collectors(device, sink, token, log, deadline=begin + self.timeout)
            success = True
        except CollectorError as e:
            log.error(f"Скрейп не выполнен: {format_error_for_log(e)}")
        except Exception as e:
            log.exception(f"Неожиданная ошибка при скрейпе: {e}")

        duration = time.monotonic() - begin
        sink.emit(Observation(SCRAPE_DURATION, duration), device)
        sink.emit(Observation(SCRAPE_SUCCESS, 1.0 if success else 0.0), device)
        log.debug(f"Скрейп завершён за {duration:.3f}с, success={int(success)}")
        return success

    def _run_collectors(
        self,
        device: DeviceTarget,
        sink: ObservationSink,
        token: Optional[CancelToken],
        log: StructuredLogger,
        deadline: float,
    ) -> None:
        with self.session_manager.connect(device, deadline=deadline, token=token) as session:
            ctx = ScrapeContext(sink=sink, session=session, device=device, logger=log)
            for collector in self.collectors:
                collector.collect(ctx)

    def scrape_all(
        self,
        devices: Sequence[DeviceTarget],
        sink: ObservationSink,
        token: Optional[CancelToken] = None,
    ) -> Dict[str, bool]:
        """
        Параллельный скрейп списка устройств.

        Ошибка одного устройства не влияет на остальные.

        Args:
            devices: Устройства
            sink: Общий буфер наблюдений
            token: Сигнал отмены для всех скрейпов

        Returns:
            Dict[str, bool]: Имя устройства -> успех
        """
        results: Dict[str, bool] = {}
        if not devices:
            return results

        workers = len(devices)
        if self.max_workers is not None:
            workers = min(self.max_workers, workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self.scrape_device, device, sink, token): device
                for device in devices
            }
            for future in as_completed(futures):
                device = futures[future]
                results[device.display_name] = future.result()

        failed = [name for name, ok in results.items() if not ok]
        if failed:
            logger.warning(
                f"Скрейп завершён: {len(devices) - len(failed)}/{len(devices)} успешно, "
                f"ошибки: {', '.join(failed)}"
            )
        else:
            logger.debug(f"Скрейп завершён: {len(devices)} устройств")
        return results


def build_static_devices(
    config: AppConfig,
    credentials_manager: Optional[CredentialsManager] = None,
) -> List[DeviceTarget]:
    """
    Устройства из секции devices.

    Пустые логин/пароль заполняются из MIKROTIK_USER / MIKROTIK_PASSWORD.

    Raises:
        ConfigError: Не загружается CA сертификат
    """
    credentials_manager = credentials_manager or CredentialsManager()
    connection = config.connection
    tls = TLSSettings.build(
        enabled=connection.enable_tls,
        insecure=connection.insecure_tls,
        ca_cert=connection.ca_cert,
    )
    devices = []
    for device_config in config.devices:
        device = DeviceTarget.from_dict(device_config.model_dump(), tls=tls)
        devices.append(
            replace(device, credentials=credentials_manager.with_defaults(device.credentials))
        )
    return devices


def build_static_scraper(
    config: AppConfig,
    client_factory: Optional[ClientFactory] = None,
) -> Scraper:
    """Scraper для static devices: features и connection из корня конфигурации."""
    timeout = config.connection.timeout
    return Scraper(
        build_collectors(config.features),
        timeout=timeout,
        max_workers=config.connection.max_workers,
        session_manager=SessionManager(timeout=timeout, client_factory=client_factory),
    )
