"""
Core модули MikroTik Exporter.

Содержит:
- RouterOSClient: Обёртка над протоколом librouteros
- SessionManager / Session: Подключение, логин, дедлайн, отмена
- DeviceTarget / TLSSettings: Устройство и настройки TLS
- CredentialsManager: Учётные данные (конфиг, файлы, окружение)
- ScrapeContext / CancelToken: Контекст скрейпа
- Метрики: MetricDescriptor, Observation, ObservationSink
- Structured Logging: JSON/Human-readable логирование
"""

from .client import Record, Reply, RouterOSClient, parse_words
from .connection import (
    DEFAULT_TIMEOUT,
    CancelToken,
    Session,
    SessionManager,
    challenge_response,
)
from .context import ScrapeContext
from .credentials import Credentials, CredentialsManager
from .device import API_PORT, API_TLS_PORT, DeviceTarget, TLSSettings, parse_target
from .logging import (
    get_logger,
    setup_logging,
    setup_logging_from_config,
    StructuredLogger,
    JSONFormatter,
    HumanFormatter,
    LogConfig,
    RotationType,
)
from .exceptions import (
    ExporterError,
    CollectorError,
    ConnectionError,
    AuthenticationError,
    QueryError,
    TimeoutError,
    CancelledError,
    ValueParseError,
    RequestConfigurationError,
    ConfigError,
    format_error_for_log,
)
from .metrics import (
    NAMESPACE,
    MetricDescriptor,
    Observation,
    ObservationSink,
    ValueKind,
)

__all__ = [
    # Client
    "Record",
    "Reply",
    "RouterOSClient",
    "parse_words",
    # Connection
    "DEFAULT_TIMEOUT",
    "CancelToken",
    "Session",
    "SessionManager",
    "challenge_response",
    "ScrapeContext",
    # Device
    "Credentials",
    "CredentialsManager",
    "API_PORT",
    "API_TLS_PORT",
    "DeviceTarget",
    "TLSSettings",
    "parse_target",
    # Logging
    "get_logger",
    "setup_logging",
    "setup_logging_from_config",
    "StructuredLogger",
    "JSONFormatter",
    "HumanFormatter",
    "LogConfig",
    "RotationType",
    # Exceptions
    "ExporterError",
    "CollectorError",
    "ConnectionError",
    "AuthenticationError",
    "QueryError",
    "TimeoutError",
    "CancelledError",
    "ValueParseError",
    "RequestConfigurationError",
    "ConfigError",
    "format_error_for_log",
    # Metrics
    "NAMESPACE",
    "MetricDescriptor",
    "Observation",
    "ObservationSink",
    "ValueKind",
]
