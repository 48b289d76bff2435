"""
Режим /probe: скрейп одного устройства по запросу.

Модуль (module) — именованный набор: учётные данные, TLS, таймаут
и включённые коллекторы. Реестр коллекторов каждого модуля строится
один раз при старте.

Пример использования:
    prober = Prober.from_config(config)
    module, device = prober.resolve("10.0.0.1:8729", "default")
    sink = prober.probe("10.0.0.1", "default")
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .collectors import build_collectors
from .core.config_schema import AppConfig, ModuleConfig
from .core.connection import CancelToken, ClientFactory, SessionManager
from .core.credentials import Credentials, CredentialsManager
from .core.device import DeviceTarget, TLSSettings, parse_target
from .core.exceptions import ConfigError, RequestConfigurationError
from .core.logging import get_logger
from .core.metrics import ObservationSink
from .scraper import Scraper

logger = get_logger(__name__)

DEFAULT_MODULE = "default"


@dataclass
class ProbeModule:
    """
    Модуль /probe.

    Attributes:
        name: Имя модуля
        scraper: Scraper с коллекторами модуля
        credentials: Учётные данные
        tls: Настройки TLS
    """
    name: str
    scraper: Scraper
    credentials: Credentials
    tls: TLSSettings

    @classmethod
    def from_config(
        cls,
        name: str,
        module: ModuleConfig,
        credentials_manager: Optional[CredentialsManager] = None,
        client_factory: Optional[ClientFactory] = None,
    ) -> "ProbeModule":
        """
        Raises:
            ConfigError: Не загружается CA сертификат модуля
        """
        credentials = Credentials(
            username=module.username,
            password=module.password,
            username_file=module.username_file,
            password_file=module.password_file,
        )
        if credentials_manager is not None:
            credentials = credentials_manager.with_defaults(credentials)

        try:
            tls = TLSSettings.build(
                enabled=module.enable_tls,
                insecure=module.insecure_tls,
                ca_cert=module.ca_cert,
            )
        except ConfigError as e:
            raise ConfigError(e.message, key=f"modules.{name}.ca_cert") from e

        scraper = Scraper(
            build_collectors(module.features),
            timeout=module.timeout,
            max_workers=1,
            session_manager=SessionManager(timeout=module.timeout, client_factory=client_factory),
        )
        return cls(name=name, scraper=scraper, credentials=credentials, tls=tls)


class Prober:
    """
    Скрейп по запросу с выбором модуля.

    Attributes:
        modules: Имя -> ProbeModule
    """

    def __init__(self, modules: Dict[str, ProbeModule]):
        self.modules = modules

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        credentials_manager: Optional[CredentialsManager] = None,
        client_factory: Optional[ClientFactory] = None,
    ) -> "Prober":
        """
        Строит модули из секции modules.

        Без секции modules создаётся модуль "default" с учётными данными
        из окружения.
        """
        credentials_manager = credentials_manager or CredentialsManager()
        module_configs = config.modules or {DEFAULT_MODULE: ModuleConfig()}
        modules = {
            name: ProbeModule.from_config(name, module_config, credentials_manager, client_factory)
            for name, module_config in module_configs.items()
        }
        logger.info(f"Модули /probe: {', '.join(sorted(modules))}")
        return cls(modules)

    def resolve(
        self,
        target: Optional[str],
        module: Optional[str] = None,
    ) -> Tuple[ProbeModule, DeviceTarget]:
        """
        Проверяет параметры запроса без обращения к устройству.

        Args:
            target: address[:port]
            module: Имя модуля (по умолчанию "default")

        Returns:
            Tuple[ProbeModule, DeviceTarget]: Модуль и устройство

        Raises:
            RequestConfigurationError: Нет target, кривой target, неизвестный модуль
        """
        if not target:
            raise RequestConfigurationError("no target", parameter="target")

        probe_module = self.modules.get(module or DEFAULT_MODULE)
        if probe_module is None:
            raise RequestConfigurationError("invalid module", parameter="module")

        address, port = parse_target(target)
        device = DeviceTarget(
            name=target,
            address=address,
            port=port,
            credentials=probe_module.credentials,
            tls=probe_module.tls,
        )
        return probe_module, device

    def probe(
        self,
        target: Optional[str],
        module: Optional[str] = None,
        token: Optional[CancelToken] = None,
    ) -> ObservationSink:
        """
        Один синхронный скрейп.

        Returns:
            ObservationSink: Наблюдения скрейпа (включая мета-метрики)

        Raises:
            RequestConfigurationError: Неверные параметры запроса
        """
        probe_module, device = self.resolve(target, module)
        sink = ObservationSink()
        probe_module.scraper.scrape_device(device, sink, token)
        return sink
