"""
Модуль управления учётными данными RouterOS API.

Источники логина и пароля:
- значения в config.yml (username / password)
- файлы (username_file / password_file), например Docker/K8s secrets
- переменные окружения MIKROTIK_USER / MIKROTIK_PASSWORD (для static devices)

Файлы читаются при каждом открытии сессии, поэтому ротация секретов
подхватывается следующим скрейпом без перезапуска.

Пример использования:
    creds = Credentials(username="prometheus", password_file="/run/secrets/ros")
    username, password = creds.resolve()
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    """
    Контейнер для учётных данных.

    Attributes:
        username: Имя пользователя
        password: Пароль
        username_file: Файл с именем пользователя
        password_file: Файл с паролем
    """
    username: str = ""
    password: str = ""
    username_file: Optional[str] = None
    password_file: Optional[str] = None

    def resolve(self) -> Tuple[str, str]:
        """
        Возвращает пару (username, password).

        Файл имеет приоритет над значением из конфигурации.

        Raises:
            AuthenticationError: Файл не читается
        """
        username = self.username
        password = self.password
        if self.username_file:
            username = _read_secret(self.username_file)
        if self.password_file:
            password = _read_secret(self.password_file)
        return username, password

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


def _read_secret(path: str) -> str:
    """Читает секрет из файла, убирая завершающий перевод строки."""
    try:
        return Path(path).read_text(encoding="utf-8").rstrip("\r\n")
    except OSError as e:
        raise AuthenticationError(f"не удалось прочитать файл учётных данных: {e}")


class CredentialsManager:
    """
    Менеджер учётных данных по умолчанию.

    Заполняет отсутствующие логин/пароль устройств из переменных окружения.

    Example:
        manager = CredentialsManager()
        creds = manager.with_defaults(Credentials(username="admin"))
    """

    ENV_USERNAME = "MIKROTIK_USER"
    ENV_PASSWORD = "MIKROTIK_PASSWORD"

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ):
        self.username = username if username is not None else os.getenv(self.ENV_USERNAME, "")
        self.password = password if password is not None else os.getenv(self.ENV_PASSWORD, "")

    def with_defaults(self, credentials: Credentials) -> Credentials:
        """
        Подставляет значения из окружения в пустые поля.

        Args:
            credentials: Учётные данные из конфигурации

        Returns:
            Credentials: Новый объект с заполненными полями
        """
        username = credentials.username
        password = credentials.password
        if not username and not credentials.username_file and self.username:
            logger.debug(f"Имя пользователя взято из {self.ENV_USERNAME}")
            username = self.username
        if not password and not credentials.password_file and self.password:
            logger.debug(f"Пароль взят из {self.ENV_PASSWORD}")
            password = self.password
        return Credentials(
            username=username,
            password=password,
            username_file=credentials.username_file,
            password_file=credentials.password_file,
        )
