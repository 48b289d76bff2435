"""
Модуль управления сессиями RouterOS API.

SessionManager обеспечивает:
- Подключение к устройству (TCP или TLS)
- Логин: современный (один запрос) и legacy MD5 challenge-response
- Дедлайн скрейпа и отмену (abort разблокирует подключение и чтение сокета)
- Перевод ошибок librouteros/сокета в типизированные исключения

Пример использования:
    manager = SessionManager(timeout=5)
    with manager.connect(device) as session:
        reply = session.run("/interface/print", "=.proplist=name")
"""

import socket
import hashlib
import logging
import threading
import time
from contextlib import contextmanager
from functools import partial
from typing import Callable, Generator, Optional, Set, Union

from librouteros.exceptions import LibRouterosError, TrapError

from .client import Reply, RouterOSClient
from .device import DeviceTarget
from .exceptions import (
    ConnectionError as CollectorConnectionError,
    AuthenticationError,
    CancelledError,
    CollectorError,
    QueryError,
    TimeoutError as CollectorTimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0

ClientFactory = Callable[..., RouterOSClient]


def challenge_response(challenge: bytes, password: str) -> str:
    """
    Вычисляет ответ legacy логина (RouterOS до 6.43).

    response = "00" + hex(MD5(0x00 + password + challenge))

    Args:
        challenge: Байты из hex-поля ret первого ответа /login
        password: Пароль

    Returns:
        str: Значение для =response=

    Example:
        challenge_response(bytes.fromhex("a1b2"), "secret")
    """
    digest = hashlib.md5()
    digest.update(b"\x00")
    digest.update(password.encode("utf-8"))
    digest.update(challenge)
    return "00" + digest.hexdigest()


class Session:
    """
    Аутентифицированное соединение с одним устройством.

    Принадлежит одному потоку скрейпа. abort() безопасно вызывать
    из другого потока (таймер дедлайна, CancelToken).

    Attributes:
        device: Устройство сессии
    """

    def __init__(self, client: RouterOSClient, device: DeviceTarget):
        self.device = device
        self._client = client
        self._abort_error: Optional[CollectorError] = None
        self._lock = threading.Lock()

    def run(self, command: str, *words: str) -> Reply:
        """
        Выполняет запрос к устройству.

        Args:
            command: Команда RouterOS API
            *words: Аргументы команды

        Returns:
            Reply: Ответ устройства

        Raises:
            QueryError: !trap, разрыв соединения, ошибка сокета
            TimeoutError: Истёк дедлайн скрейпа
            CancelledError: Скрейп отменён
        """
        self._raise_if_aborted()
        try:
            return self._client.run(command, *words)
        except (LibRouterosError, OSError) as e:
            raise self._translate(e, command) from e

    def abort(self, error: CollectorError) -> None:
        """
        Прерывает сессию. Текущий и все следующие запросы завершатся error.
        """
        with self._lock:
            if self._abort_error is not None:
                return
            self._abort_error = error
        logger.debug(f"Сессия {self.device} прервана: {error.message}")
        self._client.abort()

    @property
    def aborted(self) -> bool:
        return self._abort_error is not None

    def close(self) -> None:
        """Закрывает соединение."""
        self._client.close()

    def _raise_if_aborted(self) -> None:
        if self._abort_error is not None:
            raise self._abort_error

    def _translate(self, error: Exception, command: str) -> CollectorError:
        """Переводит ошибку librouteros/сокета в типизированное исключение."""
        if self._abort_error is not None:
            return self._abort_error
        if isinstance(error, socket.timeout):
            return CollectorTimeoutError(
                f"{command}: таймаут чтения",
                device=self.device.address,
            )
        return QueryError(
            f"{command}: {error}",
            device=self.device.address,
            command=command,
        )


class PendingDial:
    """
    Подключение к устройству, которое можно прервать.

    Фабрика клиента вызывается в отдельном потоке, вызывающий ждёт
    результат, дедлайн или abort(). Клиент, подключившийся после
    abort(), сразу закрывается.

    Attributes:
        device: Устройство
    """

    def __init__(self, device: DeviceTarget, dial: Callable[[], RouterOSClient]):
        self.device = device
        self._dial = dial
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._client: Optional[RouterOSClient] = None
        self._error: Optional[Exception] = None
        self._abort_error: Optional[CollectorError] = None

    def start(self) -> None:
        thread = threading.Thread(
            target=self._run,
            name=f"dial-{self.device.address}",
            daemon=True,
        )
        thread.start()

    def _run(self) -> None:
        try:
            client = self._dial()
        except Exception as e:
            with self._lock:
                self._error = e
            self._done.set()
            return

        with self._lock:
            if self._abort_error is None:
                self._client = client
                self._done.set()
                return
        logger.debug(f"Подключение к {self.device} завершилось после отмены, закрываем")
        client.close()

    def abort(self, error: CollectorError) -> None:
        """Прерывает ожидание подключения. Уже установленное не трогает."""
        with self._lock:
            if self._abort_error is not None or self._client is not None:
                return
            self._abort_error = error
        self._done.set()

    def wait(self, timeout: float) -> RouterOSClient:
        """
        Ждёт подключения не дольше timeout.

        Raises:
            TimeoutError: Подключение не успело до timeout
            CancelledError: abort() из CancelToken
            CollectorError: Ошибка подключения
        """
        if not self._done.wait(timeout):
            self.abort(
                CollectorTimeoutError(
                    "таймаут подключения",
                    device=self.device.address,
                    timeout_seconds=timeout,
                )
            )
        with self._lock:
            if self._client is not None:
                return self._client
            if self._abort_error is not None:
                raise self._abort_error
            raise self._error


Abortable = Union[Session, PendingDial]


class CancelToken:
    """
    Сигнал отмены для группы скрейпов.

    cancel() прерывает все активные сессии и ожидающие подключения;
    зарегистрированные после отмены прерываются сразу.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._targets: Set[Abortable] = set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        with self._lock:
            self._event.set()
            targets = list(self._targets)
        for target in targets:
            target.abort(_cancelled(target.device))

    def register(self, target: Abortable) -> None:
        with self._lock:
            if not self._event.is_set():
                self._targets.add(target)
                return
        target.abort(_cancelled(target.device))

    def unregister(self, target: Abortable) -> None:
        with self._lock:
            self._targets.discard(target)


def _cancelled(device: DeviceTarget) -> CancelledError:
    return CancelledError("скрейп отменён", device=device.address)


class SessionManager:
    """
    Менеджер сессий RouterOS API.

    Attributes:
        timeout: Таймаут скрейпа по умолчанию (секунды)
        client_factory: Фабрика клиента (RouterOSClient.dial, в тестах подменяется)

    Example:
        manager = SessionManager(timeout=5)
        with manager.connect(device, deadline=time.monotonic() + 5) as session:
            session.run("/system/resource/print")
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.timeout = timeout
        self.client_factory = client_factory or RouterOSClient.dial

    @contextmanager
    def connect(
        self,
        device: DeviceTarget,
        deadline: Optional[float] = None,
        token: Optional[CancelToken] = None,
    ) -> Generator[Session, None, None]:
        """
        Контекстный менеджер для сессии с устройством.

        Соединение закрывается при любом выходе из контекста.
        По истечении deadline сессия прерывается и запросы завершаются
        TimeoutError.

        Args:
            device: Устройство
            deadline: Момент time.monotonic(), до которого должен завершиться скрейп
            token: Сигнал отмены, прерывающий сессию

        Yields:
            Session: Аутентифицированная сессия

        Raises:
            ConnectionError: Ошибка TCP/TLS
            AuthenticationError: Логин отклонён или неверный challenge
            TimeoutError: Дедлайн истёк до завершения логина
            CancelledError: Скрейп отменён
        """
        if token is not None and token.cancelled:
            raise _cancelled(device)

        if deadline is None:
            deadline = time.monotonic() + self.timeout

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise CollectorTimeoutError(
                "дедлайн истёк до подключения",
                device=device.address,
                timeout_seconds=self.timeout,
            )

        logger.debug(f"Подключение к {device}...")
        pending = PendingDial(device, partial(self._dial, device, remaining))
        if token is not None:
            token.register(pending)
        try:
            pending.start()
            client = pending.wait(remaining)
        finally:
            if token is not None:
                token.unregister(pending)
        session = Session(client, device)

        timer = threading.Timer(
            max(deadline - time.monotonic(), 0.0),
            session.abort,
            args=(
                CollectorTimeoutError(
                    "дедлайн скрейпа истёк",
                    device=device.address,
                    timeout_seconds=self.timeout,
                ),
            ),
        )
        timer.daemon = True
        timer.start()
        if token is not None:
            token.register(session)
        try:
            self.login(session)
            logger.debug(f"Подключено к {device}")
            yield session
        finally:
            timer.cancel()
            if token is not None:
                token.unregister(session)
            session.close()
            logger.debug(f"Отключено от {device}")

    def _dial(self, device: DeviceTarget, timeout: float) -> RouterOSClient:
        try:
            return self.client_factory(
                device.address,
                device.port,
                timeout,
                device.tls.context if device.tls.enabled else None,
            )
        except socket.timeout as e:
            raise CollectorTimeoutError(
                f"таймаут подключения: {e}",
                device=device.address,
                timeout_seconds=timeout,
            ) from e
        except OSError as e:
            raise CollectorConnectionError(
                f"ошибка подключения: {e}",
                device=device.address,
                port=device.port,
            ) from e

    def login(self, session: Session) -> None:
        """
        Выполняет логин в открытой сессии.

        Ответ на /login с полями name/password:
        - !done без ret: современный логин, готово;
        - !done с ret: hex challenge, второй /login с =response=;
        - ret не hex: ошибка протокола.

        Raises:
            AuthenticationError: Логин отклонён или неверная форма ответа
        """
        device = session.device
        username, password = device.credentials.resolve()

        reply = self._login_request(session, f"=name={username}", f"=password={password}")
        challenge = reply.done.get("ret")
        if challenge is None:
            return

        try:
            challenge_bytes = bytes.fromhex(challenge)
        except ValueError as e:
            raise AuthenticationError(
                "login: неверная hex строка ret (challenge)",
                device=device.address,
            ) from e

        logger.debug(f"Legacy логин на {device}")
        self._login_request(
            session,
            f"=name={username}",
            f"=response={challenge_response(challenge_bytes, password)}",
        )

    def _login_request(self, session: Session, *words: str) -> Reply:
        try:
            return session.run("/login", *words)
        except QueryError as e:
            if isinstance(e.__cause__, TrapError):
                raise AuthenticationError(
                    f"login: {e.__cause__}",
                    device=session.device.address,
                ) from e
            raise CollectorConnectionError(
                e.message,
                device=session.device.address,
                port=session.device.port,
            ) from e
