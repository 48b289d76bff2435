"""
Модуль представления опрашиваемого устройства MikroTik.

DeviceTarget неизменяем на время скрейпа: создаётся из config.yml
(static devices) или из параметра target запроса /probe.

Пример использования:
    device = DeviceTarget(
        name="core-rtr",
        address="10.0.0.1",
        credentials=Credentials(username="prometheus", password="secret"),
    )
    device.port  # 8728
"""

import ssl
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .credentials import Credentials
from .exceptions import ConfigError, RequestConfigurationError

API_PORT = 8728
API_TLS_PORT = 8729


@dataclass(frozen=True)
class TLSSettings:
    """
    Настройки TLS для RouterOS API (api-ssl).

    Attributes:
        enabled: Использовать TLS
        insecure: Не проверять сертификат устройства
        ca_cert: Путь к PEM с корневым сертификатом
        context: Готовый SSLContext (строится в build())
    """
    enabled: bool = False
    insecure: bool = False
    ca_cert: Optional[str] = None
    context: Optional[ssl.SSLContext] = field(default=None, compare=False, repr=False)

    @classmethod
    def build(
        cls,
        enabled: bool = False,
        insecure: bool = False,
        ca_cert: Optional[str] = None,
    ) -> "TLSSettings":
        """
        Создаёт настройки и компилирует SSLContext один раз при старте.

        Raises:
            ConfigError: CA сертификат не найден или не является PEM
        """
        if not enabled:
            return cls(enabled=False, insecure=insecure, ca_cert=ca_cert)

        context = ssl.create_default_context()
        if insecure:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        if ca_cert:
            try:
                context.load_verify_locations(cafile=ca_cert)
            except (OSError, ssl.SSLError) as e:
                raise ConfigError(
                    f"не удалось загрузить CA сертификат: {e}",
                    key="ca_cert",
                    details={"path": ca_cert},
                )
        return cls(enabled=True, insecure=insecure, ca_cert=ca_cert, context=context)


@dataclass(frozen=True)
class DeviceTarget:
    """
    Устройство для скрейпа.

    Attributes:
        name: Имя устройства (лейбл name в static режиме)
        address: IP-адрес или hostname
        port: Порт API (0 = по умолчанию: 8728 или 8729 с TLS)
        credentials: Учётные данные
        tls: Настройки TLS

    Example:
        device = DeviceTarget(name="r1", address="10.0.0.1")
        print(device)  # r1 (10.0.0.1:8728)
    """
    name: str
    address: str
    port: int = 0
    credentials: Credentials = field(default_factory=Credentials)
    tls: TLSSettings = field(default_factory=TLSSettings)

    def __post_init__(self):
        if not self.port:
            default = API_TLS_PORT if self.tls.enabled else API_PORT
            object.__setattr__(self, "port", default)

    @property
    def display_name(self) -> str:
        """Возвращает отображаемое имя устройства."""
        return self.name or self.address

    def __str__(self) -> str:
        return f"{self.display_name} ({self.address}:{self.port})"

    @classmethod
    def from_dict(
        cls,
        data: dict,
        tls: Optional[TLSSettings] = None,
    ) -> "DeviceTarget":
        """
        Создаёт DeviceTarget из словаря (элемент devices в config.yml).

        Args:
            data: Словарь с name, address, port, user, password
            tls: Общие настройки TLS

        Returns:
            DeviceTarget: Экземпляр устройства
        """
        credentials = Credentials(
            username=data.get("user") or "",
            password=data.get("password") or "",
            username_file=data.get("user_file"),
            password_file=data.get("password_file"),
        )
        return cls(
            name=data.get("name") or data.get("address", ""),
            address=data.get("address", ""),
            port=int(data.get("port") or 0),
            credentials=credentials,
            tls=tls or TLSSettings(),
        )


def parse_target(target: str) -> Tuple[str, int]:
    """
    Разбирает target вида address[:port].

    Поддерживает IPv6 в квадратных скобках ("[fe80::1]:8728")
    и IPv6 без порта ("fe80::1").

    Args:
        target: Строка из параметра запроса

    Returns:
        Tuple[str, int]: (address, port), port=0 если не указан

    Raises:
        RequestConfigurationError: Пустой адрес или неверный порт
    """
    target = target.strip()
    if not target:
        raise RequestConfigurationError("no target", parameter="target")

    if target.startswith("["):
        host, sep, rest = target[1:].partition("]")
        if not sep or (rest and not rest.startswith(":")):
            raise RequestConfigurationError("invalid target", parameter="target")
        port_str = rest[1:]
    elif target.count(":") == 1:
        host, _, port_str = target.partition(":")
    else:
        host, port_str = target, ""

    if not host:
        raise RequestConfigurationError("invalid target", parameter="target")

    if not port_str:
        return host, 0
    if not port_str.isdigit() or not 0 < int(port_str) < 65536:
        raise RequestConfigurationError("invalid target", parameter="target")
    return host, int(port_str)
