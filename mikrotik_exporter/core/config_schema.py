"""
Pydantic схемы для валидации config.yml.

Валидация происходит при загрузке конфигурации.
Ошибки валидации выбрасывают ConfigError.

Пример config.yml:
    devices:
      - name: core-rtr
        address: 10.0.0.1
        user: prometheus
        password: changeme
    features:
      bgp: true
      routes: true
    modules:
      default:
        username: prometheus
        password_file: /run/secrets/routeros
        enable_tls: true
        ca_cert: /etc/mikrotik-exporter/ca.pem
        timeout: 10
        features:
          health: true

Пример использования:
    from mikrotik_exporter.core.config_schema import validate_config

    config_dict = yaml.safe_load(open("config.yml"))
    validated = validate_config(config_dict)  # raises ConfigError on failure
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from .exceptions import ConfigError

DEFAULT_TIMEOUT = 5.0
DEFAULT_PORT = 9436


class FeaturesConfig(BaseModel):
    """Флаги коллекторов. interface и resource включены по умолчанию."""
    model_config = ConfigDict(extra="forbid")

    interface: bool = True
    resource: bool = True
    bgp: bool = False
    conntrack: bool = False
    dhcp: bool = False
    dhcpl: bool = False
    dhcpv6: bool = False
    firmware: bool = False
    health: bool = False
    routes: bool = False
    poe: bool = False
    pools: bool = False
    optics: bool = False
    w60g: bool = False
    wlansta: bool = False
    capsman: bool = False
    wlanif: bool = False
    monitor: bool = False
    ipsec: bool = False
    lte: bool = False
    netwatch: bool = False


class TLSConfigMixin(BaseModel):
    """Настройки TLS (api-ssl)."""
    enable_tls: bool = False
    insecure_tls: bool = False
    ca_cert: Optional[str] = None


class ConnectionConfig(TLSConfigMixin):
    """Настройки подключения для static devices."""
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, le=300)
    # None: поток на каждое устройство
    max_workers: Optional[int] = Field(default=None, ge=1)


class DeviceConfig(BaseModel):
    """Устройство в static режиме."""
    name: str
    address: str
    port: int = Field(default=0, ge=0, le=65535)
    user: str = ""
    password: str = ""
    user_file: Optional[str] = None
    password_file: Optional[str] = None

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Адрес не может быть пустым."""
        v = v.strip()
        if not v:
            raise PydanticCustomError("empty_address", "адрес устройства не задан")
        return v


class ModuleConfig(TLSConfigMixin):
    """Модуль /probe: учётные данные, TLS, таймаут, набор коллекторов."""
    username: str = ""
    password: str = ""
    username_file: Optional[str] = None
    password_file: Optional[str] = None
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, le=300)
    features: FeaturesConfig = Field(default_factory=FeaturesConfig)

    @model_validator(mode="after")
    def check_credentials(self) -> "ModuleConfig":
        """Пароль задаётся либо значением, либо файлом."""
        if self.password and self.password_file:
            raise PydanticCustomError(
                "ambiguous_password",
                "password и password_file заданы одновременно",
            )
        if self.username and self.username_file:
            raise PydanticCustomError(
                "ambiguous_username",
                "username и username_file заданы одновременно",
            )
        return self


class LoggingConfig(BaseModel):
    """Настройки логирования."""
    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    json_format: bool = False
    console: bool = True
    file_path: Optional[str] = None
    rotation: str = Field(default="size", pattern="^(size|time|none)$")
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)  # min 1KB
    backup_count: int = Field(default=5, ge=1, le=100)
    when: str = "midnight"
    interval: int = Field(default=1, ge=1)


class ServerConfig(BaseModel):
    """HTTP сервер экспортера."""
    host: str = "0.0.0.0"
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)


class AppConfig(BaseModel):
    """Полная конфигурация приложения."""
    devices: List[DeviceConfig] = Field(default_factory=list)
    features: FeaturesConfig = Field(default_factory=FeaturesConfig)
    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)
    modules: Dict[str, ModuleConfig] = Field(default_factory=dict)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @field_validator("devices")
    @classmethod
    def validate_unique_names(cls, v: List[DeviceConfig]) -> List[DeviceConfig]:
        """Имена устройств уникальны: по ним строится лейбл name."""
        seen = set()
        for device in v:
            if device.name in seen:
                raise PydanticCustomError(
                    "duplicate_device",
                    "устройство {name} указано дважды",
                    {"name": device.name},
                )
            seen.add(device.name)
        return v


def validate_config(config_dict: dict, config_file: Optional[str] = None) -> AppConfig:
    """
    Валидирует словарь конфигурации.

    Args:
        config_dict: Словарь из YAML
        config_file: Путь к файлу (для сообщения об ошибке)

    Returns:
        AppConfig: Валидированная конфигурация

    Raises:
        ConfigError: При ошибке валидации
    """
    try:
        return AppConfig(**config_dict)
    except Exception as e:
        # Форматируем ошибку Pydantic в читаемый вид
        error_msg = str(e)
        key = None
        if hasattr(e, "errors"):
            errors = e.errors()
            if errors:
                first_error = errors[0]
                key = ".".join(str(x) for x in first_error.get("loc", []))
                msg = first_error.get("msg", "Unknown error")
                error_msg = f"{key}: {msg}"

        raise ConfigError(
            message=f"Ошибка валидации конфигурации: {error_msg}",
            config_file=config_file,
            key=key,
        )
