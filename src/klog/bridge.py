"""Route other logging systems into a klog Logger.

Usage:
    import logging
    from loguru import logger as loguru_logger

    import klog
    from klog.bridge import LoguruSink, intercept_stdlib

    # logging.getLogger('web').info(...) now goes through klog
    intercept_stdlib(klog.get_logger())

    # so does loguru_logger.info(...)
    loguru_logger.add(LoguruSink(klog.get_logger()), format='{message}')
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from loguru import logger as _loguru

from klog.errors import KlogError
from klog.styles import Severity

if TYPE_CHECKING:
    from loguru import Message

    from klog._logger import Logger

__all__ = ['InterceptHandler', 'LoguruSink', 'intercept_stdlib', 'severity_for']

_diag = _loguru.bind(klog_internal=True)


def severity_for(levelno: int) -> Severity:
    """Map a stdlib/loguru numeric level to a klog severity.

    CRITICAL maps to ERROR; forwarded records never terminate the process.

    >>> severity_for(logging.WARNING)
    <Severity.WARNING: 2>
    >>> severity_for(logging.CRITICAL)
    <Severity.ERROR: 3>
    >>> severity_for(5)
    <Severity.DEBUG: 0>
    """
    if levelno >= logging.ERROR:
        return Severity.ERROR
    if levelno >= logging.WARNING:
        return Severity.WARNING
    if levelno >= logging.INFO:
        return Severity.INFO
    return Severity.DEBUG


class InterceptHandler(logging.Handler):
    """Handler that forwards stdlib logging records to a klog Logger.

    The record's own filename and line are reported as the caller.
    """

    def __init__(self, logger: Logger, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.logger = logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = record.getMessage()
        except (TypeError, ValueError):
            # Mismatched args, keep everything the caller passed
            msg = ' '.join([str(record.msg), *(str(arg) for arg in record.args or ())])
        if record.exc_info:
            msg = f'{msg}\n{logging.Formatter().formatException(record.exc_info)}'
        try:
            self.logger.output(
                1, severity_for(record.levelno), '', (msg,),
                caller=(record.filename, record.lineno),
            )
        except KlogError:
            self.handleError(record)


def intercept_stdlib(logger: Logger, names: list[str] | None = None) -> None:
    """Route stdlib logging into a klog Logger.

    Args:
        logger: destination logger
        names: specific logger names to intercept. If None, intercepts
               the root logger (all loggers).
    """
    if not names:
        logging.basicConfig(handlers=[InterceptHandler(logger)], level=0, force=True)
        return
    for name in names:
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = [InterceptHandler(logger)]
        stdlib_logger.propagate = False
        stdlib_logger.setLevel(logging.DEBUG)  # Let klog handle filtering


class LoguruSink:
    """Loguru sink forwarding messages to a klog Logger.

    klog's own diagnostics are bound with `klog_internal` and skipped, so
    a failing backend cannot feed back into itself.
    """

    def __init__(self, logger: Logger) -> None:
        self.logger = logger

    def __call__(self, message: Message) -> None:
        record = message.record
        if record['extra'].get('klog_internal'):
            return
        text = str(message).rstrip('\n')
        try:
            self.logger.output(
                1, severity_for(record['level'].no), '', (text,),
                caller=(record['file'].name, record['line']),
            )
        except KlogError as e:
            _diag.opt(depth=1).warning(f'LoguruSink failed: {e}')


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
