"""
Клиент RouterOS API поверх librouteros.

librouteros отвечает за кодирование слов и предложений (ApiProtocol).
Здесь только примитив запрос/ответ: отправить команду, прочитать все
!re до !done и вернуть строки как есть, без приведения типов.

Ошибки не переводятся: наружу уходят исключения librouteros (TrapError,
FatalError, ConnectionClosed) и OSError. Перевод в типизированные
исключения делает Session (core/connection.py).

Пример использования:
    client = RouterOSClient.dial("10.0.0.1", 8728, timeout=5)
    reply = client.run("/system/identity/print")
    reply.rows[0]["name"]  # "core-rtr"
"""

import socket
import logging
from contextlib import suppress
from dataclasses import dataclass, field
from functools import partial
from ssl import SSLContext
from typing import Dict, Iterable, List, Optional

import librouteros
from librouteros.exceptions import TrapError
from librouteros.protocol import ApiProtocol

logger = logging.getLogger(__name__)

Record = Dict[str, str]


@dataclass
class Reply:
    """
    Ответ на одну команду.

    Attributes:
        rows: Строки !re (по одной на сущность)
        done: Поля предложения !done (например ret для =count-only=)
    """
    rows: List[Record] = field(default_factory=list)
    done: Optional[Record] = None


def parse_words(words: Iterable[str]) -> Record:
    """
    Разбирает слова "=key=value" в словарь.

    Служебные слова (.tag=...) пропускаются. Значения остаются строками.
    """
    record: Record = {}
    for word in words:
        if not word.startswith("="):
            continue
        key, _, value = word[1:].partition("=")
        record[key] = value
    return record


class RouterOSClient:
    """
    Соединение с RouterOS API.

    Не потокобезопасен: запросы выполняются строго последовательно.
    abort() можно вызывать из другого потока, чтобы разблокировать чтение.
    """

    def __init__(self, protocol: ApiProtocol):
        self._protocol = protocol

    @classmethod
    def dial(
        cls,
        address: str,
        port: int,
        timeout: float,
        ssl_context: Optional[SSLContext] = None,
        encoding: str = "utf-8",
    ) -> "RouterOSClient":
        """
        Открывает TCP (или TLS) соединение.

        Args:
            address: IP или hostname
            port: Порт API
            timeout: Таймаут сокета в секундах
            ssl_context: SSLContext для api-ssl (None = без TLS)
            encoding: Кодировка слов

        Returns:
            RouterOSClient: Клиент без аутентификации

        Raises:
            OSError: Ошибка подключения или TLS handshake
        """
        wrapper = None
        if ssl_context is not None:
            wrapper = partial(ssl_context.wrap_socket, server_hostname=address)
        transport = librouteros.create_transport(
            address,
            port=port,
            saddr=None,
            timeout=timeout,
            ssl_wrapper=wrapper,
        )
        return cls(ApiProtocol(transport=transport, encoding=encoding))

    def run(self, command: str, *words: str) -> Reply:
        """
        Выполняет команду и читает ответ до !done.

        Args:
            command: Команда ("/interface/print")
            *words: Аргументы ("=.proplist=name", "?disabled=false")

        Returns:
            Reply: Строки и поля завершения

        Raises:
            TrapError: Устройство вернуло !trap
            LibRouterosError: !fatal или закрытое соединение
            OSError: Ошибка сокета (включая таймаут)
        """
        self._protocol.writeSentence(command, *words)

        reply = Reply()
        trap: Optional[Record] = None
        while reply.done is None:
            reply_word, sentence = self._protocol.readSentence()
            record = parse_words(sentence)
            if reply_word == "!re":
                reply.rows.append(record)
            elif reply_word == "!trap":
                if trap is None:
                    trap = record
            elif reply_word == "!done":
                reply.done = record
            else:
                logger.debug(f"Пропущено предложение {reply_word} на {command}")

        if trap is not None:
            category = trap.get("category")
            raise TrapError(
                trap.get("message", "unknown error"),
                int(category) if category and category.isdigit() else None,
            )
        return reply

    def abort(self) -> None:
        """Разрывает сокет, блокирующий recv() завершается ошибкой."""
        sock = getattr(self._protocol.transport, "sock", None)
        if sock is None:
            return
        with suppress(OSError):
            sock.shutdown(socket.SHUT_RDWR)

    def close(self) -> None:
        """Закрывает соединение."""
        with suppress(OSError):
            self._protocol.close()
