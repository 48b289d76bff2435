"""
Structured Logging для MikroTik Exporter.

Два формата: human-readable для консоли и JSON для Loki/ELK.
Поля device, ip, collector, probe_module передаются именованными параметрами
и попадают в запись лога как extra.

Пример использования:
    from mikrotik_exporter.core.logging import setup_logging, get_logger

    setup_logging(json_format=True)

    logger = get_logger(__name__)
    logger.info("Скрейп завершён", device="core-rtr", ip="10.0.0.1")

Формат вывода (JSON):
    {"timestamp": "2026-01-12T10:30:15.123456", "level": "INFO",
     "message": "Скрейп завершён", "logger": "mikrotik_exporter.scraper",
     "device": "core-rtr", "ip": "10.0.0.1"}
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass
from enum import Enum


class RotationType(str, Enum):
    """Тип ротации логов."""
    SIZE = "size"
    TIME = "time"
    NONE = "none"


@dataclass
class LogConfig:
    """
    Конфигурация логирования.

    Attributes:
        level: Уровень логирования (DEBUG, INFO, etc.)
        json_format: JSON формат (True) или human-readable (False)
        console: Выводить в консоль
        file_path: Путь к файлу логов (None = без файла)
        rotation: Тип ротации (size, time, none)
        max_bytes: Макс размер файла для size-ротации
        backup_count: Количество backup файлов
        when: Интервал для time-ротации (S, M, H, D, midnight)
        interval: Частота ротации для time

    Example:
        config = LogConfig(json_format=True, file_path="logs/exporter.log")
        setup_logging_from_config(config)
    """
    level: int = logging.INFO
    json_format: bool = False
    console: bool = True
    file_path: Optional[str] = None
    rotation: RotationType = RotationType.SIZE
    max_bytes: int = 10 * 1024 * 1024  # 10 MB
    backup_count: int = 5
    when: str = "midnight"
    interval: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogConfig":
        """Создаёт конфигурацию из словаря (секция logging в config.yml)."""
        rotation = data.get("rotation", "size")
        if isinstance(rotation, str):
            rotation = RotationType(rotation)

        level = data.get("level", "INFO")
        if isinstance(level, str):
            level = getattr(logging, level.upper(), logging.INFO)

        return cls(
            level=level,
            json_format=data.get("json_format", False),
            console=data.get("console", True),
            file_path=data.get("file_path"),
            rotation=rotation,
            max_bytes=data.get("max_bytes", 10 * 1024 * 1024),
            backup_count=data.get("backup_count", 5),
            when=data.get("when", "midnight"),
            interval=data.get("interval", 1),
        )


class JSONFormatter(logging.Formatter):
    """
    JSON форматтер для logging.

    Стандартные поля: timestamp, level, message, logger.
    Дополнительные поля из extra логируются как есть.
    """

    # Поля logging.LogRecord которые не нужно включать в JSON
    RESERVED_ATTRS = {
        "args", "asctime", "created", "exc_info", "exc_text",
        "filename", "funcName", "levelname", "levelno", "lineno",
        "module", "msecs", "msg", "name", "pathname", "process",
        "processName", "relativeCreated", "stack_info", "thread",
        "threadName", "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        for key, value in record.__dict__.items():
            if key not in self.RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class HumanFormatter(logging.Formatter):
    """
    Human-readable форматтер с поддержкой extra полей.

    Формат: TIMESTAMP - LEVEL - MESSAGE (device=X, ip=Y)
    """

    EXTRA_FIELDS = ("device", "ip", "probe_module", "collector", "property", "value")

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)
        message = record.getMessage()

        extras = []
        for attr in self.EXTRA_FIELDS:
            value = getattr(record, attr, None)
            if value:
                extras.append(f"{attr}={value}")

        extra_str = f" ({', '.join(extras)})" if extras else ""
        result = f"{timestamp} - {level} - {message}{extra_str}"

        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)

        return result


class StructuredLogger:
    """
    Обёртка над logging.Logger с поддержкой структурированных полей.

    Позволяет логировать с именованными параметрами:
        logger.info("Подключение", device="core-rtr", ip="10.0.0.1")

    Вместо:
        logger.info("Подключение к core-rtr (10.0.0.1)")
    """

    def __init__(self, name: str, default_extra: Optional[Dict[str, Any]] = None):
        """
        Args:
            name: Имя логгера
            default_extra: Поля добавляемые ко всем сообщениям
        """
        self._logger = logging.getLogger(name)
        self._default_extra = default_extra or {}

    def _log(
        self,
        level: int,
        message: str,
        exc_info: bool = False,
        **kwargs: Any,
    ) -> None:
        extra = {**self._default_extra, **kwargs}
        self._logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log DEBUG."""
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log INFO."""
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log WARNING."""
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        """Log ERROR."""
        self._log(logging.ERROR, message, exc_info=exc_info, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log ERROR с traceback."""
        self._log(logging.ERROR, message, exc_info=True, **kwargs)

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """
        Создаёт новый логгер с дополнительными default полями.

        Args:
            **kwargs: Поля добавляемые ко всем сообщениям

        Returns:
            StructuredLogger: Новый логгер

        Example:
            device_logger = logger.bind(device="core-rtr", ip="10.0.0.1")
            device_logger.info("Connected")  # автоматически добавит device, ip
        """
        new_extra = {**self._default_extra, **kwargs}
        return StructuredLogger(self._logger.name, default_extra=new_extra)

    @property
    def extra(self) -> Dict[str, Any]:
        """Поля, привязанные через bind()."""
        return dict(self._default_extra)


# Кэш логгеров
_loggers: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """
    Получает или создаёт StructuredLogger.

    Args:
        name: Имя логгера (обычно __name__)

    Returns:
        StructuredLogger: Логгер
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]


def setup_logging(
    json_format: bool = False,
    level: int = logging.INFO,
    stream: Any = None,
) -> None:
    """
    Настраивает логирование в консоль.

    Args:
        json_format: True для JSON, False для human-readable
        level: Уровень логирования
        stream: Поток вывода (по умолчанию sys.stderr)

    Example:
        setup_logging(json_format=args.log_format == "json")
    """
    setup_logging_from_config(
        LogConfig(level=level, json_format=json_format),
        stream=stream,
    )


def _create_file_handler(config: LogConfig) -> logging.Handler:
    """
    Создаёт file handler с ротацией.

    Args:
        config: LogConfig с путём и параметрами ротации

    Returns:
        logging.Handler: FileHandler с нужной ротацией
    """
    log_path = Path(config.file_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    if config.rotation == RotationType.SIZE:
        return logging.handlers.RotatingFileHandler(
            filename=config.file_path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    elif config.rotation == RotationType.TIME:
        return logging.handlers.TimedRotatingFileHandler(
            filename=config.file_path,
            when=config.when,
            interval=config.interval,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    else:
        return logging.FileHandler(config.file_path, encoding="utf-8")


def setup_logging_from_config(config: LogConfig, stream: Any = None) -> None:
    """
    Настраивает логирование из конфигурации.

    Консоль пишется в выбранном формате, файл (если задан) тоже.
    Существующие handlers root-логгера удаляются.

    Args:
        config: LogConfig с настройками
        stream: Поток для консольного handler (по умолчанию sys.stderr)
    """
    formatter = JSONFormatter() if config.json_format else HumanFormatter()

    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers: List[logging.Handler] = []

    if config.console:
        console_handler = logging.StreamHandler(stream or sys.stderr)
        console_handler.setLevel(config.level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    if config.file_path:
        file_handler = _create_file_handler(config)
        file_handler.setLevel(config.level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    root_logger.setLevel(config.level)
