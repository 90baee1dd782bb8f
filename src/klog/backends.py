"""Output backends - destinations that accept formatted bytes.

A logger holds exactly one backend at a time. Each backend owns the
resource it writes to and releases it in close().
"""
from __future__ import annotations

import os
import sys
import time
from abc import ABC, abstractmethod
from enum import StrEnum
from typing import IO, Any

import redis
from loguru import logger as _loguru

from klog import config as config_klog
from klog.errors import ConfigurationError, FormatError, WriteError

__all__ = [
    'Backend',
    'BackendKind',
    'ConsoleBackend',
    'FileBackend',
    'RedisBackend',
    'make_backend',
]

_diag = _loguru.bind(klog_internal=True)

DEFAULT_REDIS_PORT = 6379


class BackendKind(StrEnum):
    """Backend selectors accepted by Logger.set_backend."""
    CONSOLE = 'console'
    FILE = 'file'
    REDIS = 'redis'


class Backend(ABC):
    """Destination for formatted log lines."""

    kind: BackendKind

    # Plain backends receive `<label>\t<message>` without terminal decoration
    plain = False

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Write data, returning the number of bytes written.

        Raises WriteError when the underlying transport fails.
        """
        ...

    def close(self) -> None:
        """Release resources owned by the backend."""


class ConsoleBackend(Backend):
    """Write to the process standard output.

    The stream is bound at construction and never closed by the backend.
    """

    kind = BackendKind.CONSOLE

    def __init__(self, stream: IO[str] | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def write(self, data: bytes) -> int:
        try:
            self.stream.write(data.decode('utf-8'))
            self.stream.flush()
        except (OSError, ValueError) as exc:
            raise WriteError(f'Console write failed: {exc}') from exc
        return len(data)


class FileBackend(Backend):
    """Append to a file, creating it with mode 0644 if absent.
    """

    kind = BackendKind.FILE

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = os.fspath(path)
        try:
            fd = os.open(self.path, os.O_CREAT | os.O_APPEND | os.O_RDWR, 0o644)
        except OSError as exc:
            raise ConfigurationError(f'Cannot open log file {self.path}: {exc}') from exc
        self._file = os.fdopen(fd, 'a+b', buffering=0)

    @property
    def closed(self) -> bool:
        return self._file.closed

    def write(self, data: bytes) -> int:
        try:
            return self._file.write(data)
        except (OSError, ValueError) as exc:
            raise WriteError(f'Write to {self.path} failed: {exc}') from exc

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()


class RedisBackend(Backend):
    """Redis sorted-set sink.

    Each record is added to the sorted set named by its severity label,
    scored by the Unix time of the write (seconds). The connection is
    opened eagerly and probed with PING.

    Address may be `host:port`, a bare `host`, or a `redis://` URL.
    """

    kind = BackendKind.REDIS
    plain = True

    def __init__(
        self,
        address: str,
        password: str = '',
        db: int = 0,
        socket_timeout: float | None = None,
    ) -> None:
        self.address = address
        self.password = password
        self.db = db
        if socket_timeout is None:
            socket_timeout = config_klog.redis.timeout
        self.client = self._connect(socket_timeout)
        try:
            self.client.ping()
        except redis.RedisError as exc:
            self.client.close()
            raise ConfigurationError(f'Redis at {address!r} is not reachable: {exc}') from exc
        _diag.debug('Connected redis log sink at {} db {}', address, db)

    def _connect(self, socket_timeout: float | None) -> redis.Redis:
        options: dict[str, Any] = {
            'password': self.password or None,
            'db': self.db,
            'socket_timeout': socket_timeout,
        }
        if '://' in self.address:
            return redis.Redis.from_url(self.address, **options)
        host, sep, port = self.address.rpartition(':')
        if not sep:
            host, port = self.address, DEFAULT_REDIS_PORT
        try:
            port = int(port)
        except ValueError:
            raise ConfigurationError(f'Invalid redis address: {self.address!r}') from None
        return redis.Redis(host=host or 'localhost', port=port, **options)

    def write(self, data: bytes) -> int:
        try:
            text = data.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise FormatError(f'Payload is not UTF-8: {data[:40]!r}') from exc
        level, sep, body = text.partition('\t')
        if not sep:
            raise FormatError(f'Expected "<label>\\t<body>", got {data[:40]!r}')
        try:
            self.client.zadd(level, {body: int(time.time())})
        except redis.RedisError as exc:
            raise WriteError(f'ZADD {level} failed: {exc}') from exc
        return len(data)

    def close(self) -> None:
        self.client.close()


def make_backend(kind: BackendKind | str, target: str | os.PathLike = '', **kwargs) -> Backend:
    """Construct the backend selected by kind.

    Args:
        kind: BackendKind or its string value
        target: file path for FILE, address for REDIS, ignored for CONSOLE
        **kwargs: extra constructor arguments for the backend

    Raises
        ConfigurationError: unknown kind, or the backend could not be opened
    """
    try:
        kind = BackendKind(kind)
    except ValueError:
        raise ConfigurationError(f'Unknown backend kind: {kind!r}') from None
    if kind is BackendKind.CONSOLE:
        return ConsoleBackend(**kwargs)
    if kind is BackendKind.FILE:
        return FileBackend(target)
    return RedisBackend(os.fspath(target), **kwargs)
