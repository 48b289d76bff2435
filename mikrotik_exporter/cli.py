"""
CLI экспортера.

Загружает конфигурацию, настраивает логирование и запускает
HTTP сервер (uvicorn).

Примеры использования:
    mikrotik-exporter --config config.yml
    mikrotik-exporter --port 9436 --log-format json
    MIKROTIK_USER=prometheus MIKROTIK_PASSWORD=secret mikrotik-exporter
"""

import sys
import argparse
import logging
from typing import List, Optional

import uvicorn

from . import __version__
from .config import load_config
from .core.config_schema import AppConfig
from .core.exceptions import ConfigError
from .core.logging import LogConfig, setup_logging_from_config

logger = logging.getLogger(__name__)


def setup_parser() -> argparse.ArgumentParser:
    """
    Создаёт парсер аргументов командной строки.

    Returns:
        ArgumentParser: Настроенный парсер
    """
    parser = argparse.ArgumentParser(
        prog="mikrotik-exporter",
        description="Prometheus экспортер для MikroTik RouterOS API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры:
  %(prog)s --config config.yml
  %(prog)s --port 9436 --log-format json
  %(prog)s --log-level DEBUG
        """,
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Путь к файлу конфигурации YAML (default: $MIKROTIK_EXPORTER_CONFIG или config.yml)",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Адрес HTTP сервера (default: из конфигурации, 0.0.0.0)",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=None,
        help="Порт HTTP сервера (default: из конфигурации, 9436)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Уровень логирования",
    )
    parser.add_argument(
        "--log-format",
        choices=["human", "json"],
        default=None,
        help="Формат логов",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def build_log_config(config: AppConfig, args: argparse.Namespace) -> LogConfig:
    """
    Настройки логирования: секция logging, поверх неё аргументы CLI.
    """
    data = config.logging.model_dump()
    if args.log_level:
        data["level"] = args.log_level
    if args.log_format:
        data["json_format"] = args.log_format == "json"
    return LogConfig.from_dict(data)


def main(argv: Optional[List[str]] = None) -> None:
    """Главная функция CLI."""
    parser = setup_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error(f"Ошибка конфигурации: {e}")
        sys.exit(1)

    setup_logging_from_config(build_log_config(config, args))

    # Отложенный импорт: FastAPI нужен только для запуска сервера
    from .api import create_app

    try:
        app = create_app(config)
    except ConfigError as e:
        logger.error(f"Ошибка конфигурации: {e}")
        sys.exit(1)

    host = args.host or config.server.host
    port = args.port or config.server.port
    logger.info(f"Запуск HTTP сервера на {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
