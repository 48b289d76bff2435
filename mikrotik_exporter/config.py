"""
Загрузчик конфигурации из config.yml.

Порядок поиска файла:
1. Явный путь (--config)
2. Переменная окружения MIKROTIK_EXPORTER_CONFIG
3. config.yml в текущем каталоге (если есть)

Без файла используется конфигурация по умолчанию: нет static devices,
модуль "default" для /probe с учётными данными из окружения.

Пример:
    config = load_config("/etc/mikrotik-exporter/config.yml")
    config.connection.timeout   # 5.0
    config.modules["default"].features.bgp
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml

from .core.config_schema import AppConfig, validate_config
from .core.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_CONFIG = "MIKROTIK_EXPORTER_CONFIG"
DEFAULT_CONFIG_FILE = "config.yml"


def find_config_file(path: Optional[str] = None) -> Optional[Path]:
    """
    Определяет путь к файлу конфигурации.

    Args:
        path: Явно указанный путь

    Returns:
        Optional[Path]: Путь или None если файл не задан и не найден

    Raises:
        ConfigError: Явно указанный файл не существует
    """
    explicit = path or os.getenv(ENV_CONFIG)
    if explicit:
        config_path = Path(explicit)
        if not config_path.is_file():
            raise ConfigError("Файл конфигурации не найден", config_file=str(config_path))
        return config_path

    default = Path(DEFAULT_CONFIG_FILE)
    return default if default.is_file() else None


def load_config(path: Optional[str] = None) -> AppConfig:
    """
    Загружает и валидирует конфигурацию.

    Args:
        path: Путь к YAML файлу

    Returns:
        AppConfig: Валидированная конфигурация

    Raises:
        ConfigError: Файл не читается, не YAML или не проходит валидацию
    """
    config_path = find_config_file(path)
    if config_path is None:
        logger.info("Файл конфигурации не задан, используются значения по умолчанию")
        return validate_config({})

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Не удалось прочитать файл: {e}", config_file=str(config_path))
    except yaml.YAMLError as e:
        raise ConfigError(f"Ошибка YAML: {e}", config_file=str(config_path))

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Корень конфигурации должен быть словарём", config_file=str(config_path))

    config = validate_config(data, config_file=str(config_path))
    logger.info(
        f"Конфигурация загружена из {config_path}: "
        f"{len(config.devices)} устройств, {len(config.modules)} модулей"
    )
    return config
