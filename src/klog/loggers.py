"""Stream loggers for capturing output."""
from __future__ import annotations

import io
from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any

from klog.styles import Severity

if TYPE_CHECKING:
    from klog._logger import Logger

__all__ = ['StreamLogger', 'log_exception']


class StreamLogger:
    """File-like object logging each written line.

    Patch over stdout/stderr to log print statements:

    >>> import sys
    >>> sys.stderr = StreamLogger(get_logger())  # doctest: +SKIP

    Placeholders isatty and fileno mimic python stream.
    """

    def __init__(self, logger: Logger, level: Severity = Severity.INFO) -> None:
        self.logger = logger
        self.level = level

    def write(self, buf: str) -> int:
        """Write buffer lines to logger."""
        for line in buf.rstrip().splitlines():
            msg = line.rstrip()
            if msg:
                self.logger.log(self.level, msg, depth=2)
        return len(buf)

    def flush(self) -> None:
        pass

    def isatty(self) -> bool:
        """Return False as this is not a TTY.
        """
        return False

    def fileno(self) -> int:
        """Raise UnsupportedOperation as this is not a real file.
        """
        raise io.UnsupportedOperation('fileno')


def log_exception(logger: Logger) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator that logs exceptions at ERROR and re-raises them.
    """
    def wrapper(fn: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(fn)
        def wrapped_fn(*args: Any, **kwargs: Any) -> Any:
            try:
                return fn(*args, **kwargs)
            except Exception as exc:
                logger.errorf('%s: %s', type(exc).__name__, exc)
                raise
        return wrapped_fn
    return wrapper
