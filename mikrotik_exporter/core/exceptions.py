"""
Типизированные исключения для MikroTik Exporter.

Иерархия:
    ExporterError (базовый)
    ├── CollectorError (сбор метрик с устройства)
    │   ├── ConnectionError (TCP/TLS подключение)
    │   ├── AuthenticationError (логин отклонён / неверный challenge)
    │   ├── QueryError (запрос к RouterOS API)
    │   ├── TimeoutError (истёк дедлайн скрейпа)
    │   └── CancelledError (скрейп отменён)
    ├── ValueParseError (одно значение не распарсилось)
    ├── RequestConfigurationError (неверный /probe запрос)
    └── ConfigError (конфигурация)

CollectorError и наследники прерывают скрейп устройства целиком.
ValueParseError изолирован: пропускается только одно наблюдение.

Пример использования:
    from mikrotik_exporter.core.exceptions import QueryError, ValueParseError

    try:
        reply = session.run("/interface/print")
    except QueryError as e:
        logger.error(f"Запрос не выполнен: {e.command} - {e.message}")
"""

from typing import Optional, Any


class ExporterError(Exception):
    """
    Базовое исключение для всех ошибок MikroTik Exporter.

    Attributes:
        message: Описание ошибки
        details: Дополнительные детали (dict)
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def to_dict(self) -> dict:
        """Сериализация для логов."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# === Collector Errors ===

class CollectorError(ExporterError):
    """
    Ошибка при скрейпе устройства. Прерывает оставшиеся коллекторы.

    Attributes:
        device: Имя или адрес устройства
        message: Описание ошибки
    """

    def __init__(
        self,
        message: str,
        device: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.device = device
        details = details or {}
        if device:
            details["device"] = device
        super().__init__(message, details)


class ConnectionError(CollectorError):
    """
    Ошибка TCP или TLS подключения.

    Пример:
        raise ConnectionError("Connection refused", device="10.0.0.1", port=8728)
    """

    def __init__(
        self,
        message: str,
        device: Optional[str] = None,
        port: Optional[int] = None,
        details: Optional[dict] = None,
    ):
        self.port = port
        details = details or {}
        if port:
            details["port"] = port
        super().__init__(message, device, details)


class AuthenticationError(CollectorError):
    """
    Логин отклонён или ответ на /login имеет неожиданную форму.

    Пример:
        raise AuthenticationError("invalid user name or password", device="10.0.0.1")
    """
    pass


class QueryError(CollectorError):
    """
    Ошибка выполнения запроса к RouterOS API.

    Attributes:
        command: Команда которая вызвала ошибку

    Пример:
        raise QueryError("no such command", device="r1", command="/ip/route/print")
    """

    def __init__(
        self,
        message: str,
        device: Optional[str] = None,
        command: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.command = command
        details = details or {}
        if command:
            details["command"] = command
        super().__init__(message, device, details)


class TimeoutError(CollectorError):
    """
    Истёк дедлайн скрейпа устройства.

    Attributes:
        timeout_seconds: Значение таймаута

    Пример:
        raise TimeoutError("scrape deadline exceeded", device="10.0.0.1", timeout_seconds=5)
    """

    def __init__(
        self,
        message: str,
        device: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        details: Optional[dict] = None,
    ):
        self.timeout_seconds = timeout_seconds
        details = details or {}
        if timeout_seconds:
            details["timeout_seconds"] = timeout_seconds
        super().__init__(message, device, details)


class CancelledError(CollectorError):
    """Скрейп отменён (клиент отключился или приложение завершается)."""
    pass


# === Value Errors ===

class ValueParseError(ExporterError):
    """
    Значение свойства не удалось нормализовать в число.

    Attributes:
        value: Сырое значение от устройства
        property: Имя свойства (если известно)

    Пример:
        raise ValueParseError("invalid duration", value="59")
    """

    def __init__(
        self,
        message: str,
        value: Optional[Any] = None,
        property: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.value = value
        self.property = property
        details = details or {}
        if property:
            details["property"] = property
        if value is not None:
            details["value"] = str(value)[:100]
        super().__init__(message, details)


# === Request / Config Errors ===

class RequestConfigurationError(ExporterError):
    """
    Неверный /probe запрос: нет target, неизвестный module, кривой порт.

    Возвращается клиенту как HTTP 400 без обращения к устройству.

    Attributes:
        parameter: Имя параметра запроса
    """

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.parameter = parameter
        details = details or {}
        if parameter:
            details["parameter"] = parameter
        super().__init__(message, details)


class ConfigError(ExporterError):
    """
    Ошибка конфигурации.

    Attributes:
        config_file: Путь к файлу конфигурации
        key: Ключ конфигурации с ошибкой

    Пример:
        raise ConfigError("CA certificate not found", config_file="config.yml", key="modules.default.ca_cert")
    """

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        key: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.config_file = config_file
        self.key = key
        details = details or {}
        if config_file:
            details["config_file"] = config_file
        if key:
            details["key"] = key
        super().__init__(message, details)


# === Utility Functions ===

def format_error_for_log(error: Exception) -> str:
    """
    Форматирует ошибку для вывода в лог.

    Args:
        error: Исключение

    Returns:
        str: Отформатированная строка ошибки
    """
    if isinstance(error, ExporterError):
        return str(error)
    return f"{error.__class__.__name__}: {error}"
