"""Logger - level gate, formatting and dispatch to a single backend.
"""
from __future__ import annotations

import os
import sys
import threading
from typing import Any

from libb import stream_is_tty
from loguru import logger as _loguru

from klog import config as config_klog
from klog.backends import Backend, BackendKind, ConsoleBackend, make_backend
from klog.errors import KlogError
from klog.flags import Flag
from klog.formatter import format_record
from klog.styles import Severity, to_severity

__all__ = ['Logger', 'get_logger']

_diag = _loguru.bind(klog_internal=True)


def _detect_color() -> bool:
    """Color only on an interactive terminal outside Windows consoles."""
    return sys.platform != 'win32' and bool(stream_is_tty(sys.stdout))


class Logger:
    """Severity-gated logger writing to one backend.

    Configuration is changed through the fluent setters and read on every
    call. Backend writes and backend replacement are serialized by a lock
    owned by the logger; formatting happens outside it.

    >>> logger = Logger(color=False)
    >>> logger.set_level('debug').set_flags(0).level
    <Severity.DEBUG: 0>
    """

    def __init__(
        self,
        level: Severity | int | str = Severity.INFO,
        flags: int = Flag.STDFLAG,
        prefix: str = '',
        backend: Backend | None = None,
        color: bool | None = None,
    ) -> None:
        self._level = to_severity(level)
        self._flags = flags
        self._prefix = prefix
        self._backend = backend if backend is not None else ConsoleBackend()
        self._color = _detect_color() if color is None else color
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f'<Logger level={self._level.name} backend={self._backend.kind}>'

    # Configuration

    @property
    def level(self) -> Severity:
        return self._level

    def set_level(self, level: Severity | int | str) -> Logger:
        self._level = to_severity(level)
        return self

    @property
    def flags(self) -> int:
        return self._flags

    def set_flags(self, flags: int) -> Logger:
        """Change the output decorations, see Flag."""
        self._flags = flags
        return self

    @property
    def prefix(self) -> str:
        return self._prefix

    def set_prefix(self, prefix: str) -> Logger:
        self._prefix = prefix
        return self

    @property
    def color_enabled(self) -> bool:
        return self._color

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def kind(self) -> BackendKind:
        return self._backend.kind

    def set_backend(self, kind: BackendKind | str, target: str | os.PathLike = '', **kwargs) -> None:
        """Switch output to a new backend.

        The new backend is built first; the current one is closed and
        replaced only if that succeeds.

        Args:
            kind: 'console', 'file' or 'redis'
            target: file path or redis address
            **kwargs: passed to the backend constructor

        Raises
            ConfigurationError: the backend could not be opened. The
                previous backend stays active.
        """
        self._swap(make_backend(kind, target, **kwargs))

    def set_redis_backend(self, address: str, password: str | None = None, db: int | None = None) -> None:
        """Switch output to a redis sorted-set sink.

        Password and db default to CONFIG_KLOG_REDIS_PASSWORD and
        CONFIG_KLOG_REDIS_DB.
        """
        if password is None:
            password = config_klog.redis.password
        if db is None:
            db = config_klog.redis.db
        self.set_backend(BackendKind.REDIS, address, password=password, db=db)

    def _swap(self, backend: Backend) -> None:
        with self._lock:
            previous, self._backend = self._backend, backend
        if previous is not backend:
            previous.close()
        _diag.debug('Logger backend switched from {} to {}', previous.kind, backend.kind)

    def close(self) -> None:
        """Close the active backend and fall back to the console."""
        self._swap(ConsoleBackend())

    # Output

    def output(
        self,
        calldepth: int,
        level: Severity,
        fmt: str = '',
        args: tuple[Any, ...] = (),
        caller: tuple[str, int] | None = None,
    ) -> int:
        """Format and write one record, returning the bytes written.

        This is the lowest-level entry point and the only one that
        reports write failures. `calldepth` counts the frames between
        this method and the call site reported by Flag.SHORTFILE.

        Raises
            WriteError: the backend failed
            FormatError: the backend rejected the payload
        """
        if level < self._level:
            return 0
        options = {
            'flags': self._flags,
            'prefix': self._prefix,
            'color': self._color,
            'calldepth': calldepth + 1,
            'caller': caller,
        }
        plain = self._backend.plain
        data = format_record(level, fmt, args, plain=plain, **options)
        with self._lock:
            backend = self._backend
            # replaced since formatting, payload shape may differ
            if backend.plain != plain:
                data = format_record(level, fmt, args, plain=backend.plain, **options)
            return backend.write(data)

    def _terminate(self) -> None:
        """Exit the process with status 1.

        From the main thread this raises SystemExit. Elsewhere that would
        only end the thread, so the backend is closed under the lock and
        the process exits immediately.
        """
        if threading.current_thread() is threading.main_thread():
            sys.exit(1)
        with self._lock:
            try:
                self._backend.close()
            except (KlogError, OSError) as exc:
                _diag.warning('klog {} close failed: {}', self._backend.kind, exc)
        os._exit(1)

    def _emit(self, level: Severity, fmt: str, args: tuple[Any, ...], calldepth: int = 1) -> None:
        try:
            self.output(calldepth + 2, level, fmt, args)
        except KlogError as exc:
            _diag.opt(depth=calldepth + 1).warning('klog {} write failed: {}', self._backend.kind, exc)

    def log(self, level: Severity | int | str, *args: Any, depth: int = 1) -> None:
        """Log args at level. `depth` selects the caller reported by
        Flag.SHORTFILE, 1 being the code calling this method.
        """
        self._emit(to_severity(level), '', args, calldepth=depth)

    def debug(self, *args: Any) -> None:
        self._emit(Severity.DEBUG, '', args)

    def debugf(self, fmt: str, *args: Any) -> None:
        self._emit(Severity.DEBUG, fmt, args)

    def info(self, *args: Any) -> None:
        self._emit(Severity.INFO, '', args)

    def infof(self, fmt: str, *args: Any) -> None:
        self._emit(Severity.INFO, fmt, args)

    def warning(self, *args: Any) -> None:
        self._emit(Severity.WARNING, '', args)

    def warningf(self, fmt: str, *args: Any) -> None:
        self._emit(Severity.WARNING, fmt, args)

    def error(self, *args: Any) -> None:
        self._emit(Severity.ERROR, '', args)

    def errorf(self, fmt: str, *args: Any) -> None:
        self._emit(Severity.ERROR, fmt, args)

    def fatal(self, *args: Any) -> None:
        """Log at FATAL and exit with status 1, even if the write failed."""
        try:
            self._emit(Severity.FATAL, '', args)
        finally:
            self._terminate()

    def fatalf(self, fmt: str, *args: Any) -> None:
        """Log at FATAL and exit with status 1, even if the write failed."""
        try:
            self._emit(Severity.FATAL, fmt, args)
        finally:
            self._terminate()

    # Aliases
    warn = warning
    warnf = warningf


# Default process-wide logger
_default_logger: Logger | None = None
_default_lock = threading.Lock()


def get_logger() -> Logger:
    """Return the default logger, creating it on first use.

    The default logs INFO and above to stdout with Flag.STDFLAG.

    Examples
        >>> get_logger() is get_logger()
        True
    """
    global _default_logger
    if _default_logger is None:
        with _default_lock:
            if _default_logger is None:
                _default_logger = Logger()
    return _default_logger


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
