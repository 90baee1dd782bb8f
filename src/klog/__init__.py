"""Small severity-gated logger with console, file and redis backends.

Public API - users should only import from this module.

Usage:
    import klog

    # Module-level logging through the default logger
    klog.info('Application started')
    klog.errorf('%s failed after %d tries', 'fetch', 3)

    # Configure the default logger
    klog.get_logger().set_level('debug').set_flags(klog.Flag.DEVFLAG)
    klog.set_backend('file', '/var/log/app.log')

    # Independent, caller-owned loggers
    audit = klog.Logger(prefix='audit ')
    audit.set_backend('redis', 'localhost:6379')
    audit.warning('disk full')
"""
import sys

from klog._logger import Logger, get_logger
from klog.backends import Backend, BackendKind, ConsoleBackend, FileBackend
from klog.backends import RedisBackend, make_backend
from klog.errors import ConfigurationError, FormatError, KlogError, WriteError
from klog.flags import Flag
from klog.loggers import StreamLogger, log_exception
from klog.styles import Severity

if sys.platform == 'win32':
    import colorama
    colorama.just_fix_windows_console()


# Module-level convenience functions
def set_backend(kind, target='', **kwargs) -> None:
    """Switch the default logger's backend."""
    get_logger().set_backend(kind, target, **kwargs)


def set_level(level) -> Logger:
    """Set the default logger's level."""
    return get_logger().set_level(level)


def set_flags(flags: int) -> Logger:
    """Set the default logger's flags."""
    return get_logger().set_flags(flags)


def set_prefix(prefix: str) -> Logger:
    """Set the default logger's prefix."""
    return get_logger().set_prefix(prefix)


def debug(*args) -> None:
    """Log a debug message."""
    get_logger()._emit(Severity.DEBUG, '', args)


def debugf(fmt: str, *args) -> None:
    """Log a formatted debug message."""
    get_logger()._emit(Severity.DEBUG, fmt, args)


def info(*args) -> None:
    """Log an info message."""
    get_logger()._emit(Severity.INFO, '', args)


def infof(fmt: str, *args) -> None:
    """Log a formatted info message."""
    get_logger()._emit(Severity.INFO, fmt, args)


def warning(*args) -> None:
    """Log a warning message."""
    get_logger()._emit(Severity.WARNING, '', args)


def warningf(fmt: str, *args) -> None:
    """Log a formatted warning message."""
    get_logger()._emit(Severity.WARNING, fmt, args)


def error(*args) -> None:
    """Log an error message."""
    get_logger()._emit(Severity.ERROR, '', args)


def errorf(fmt: str, *args) -> None:
    """Log a formatted error message."""
    get_logger()._emit(Severity.ERROR, fmt, args)


def fatal(*args) -> None:
    """Log a fatal message and exit with status 1."""
    logger = get_logger()
    try:
        logger._emit(Severity.FATAL, '', args)
    finally:
        logger._terminate()


def fatalf(fmt: str, *args) -> None:
    """Log a formatted fatal message and exit with status 1."""
    logger = get_logger()
    try:
        logger._emit(Severity.FATAL, fmt, args)
    finally:
        logger._terminate()


# Aliases
warn = warning
warnf = warningf


__all__ = [
    # Logger access
    'get_logger',
    'Logger',
    'Severity',
    'Flag',
    # Configuration
    'set_backend',
    'set_level',
    'set_flags',
    'set_prefix',
    # Logging methods
    'debug',
    'debugf',
    'info',
    'infof',
    'warning',
    'warningf',
    'warn',
    'warnf',
    'error',
    'errorf',
    'fatal',
    'fatalf',
    # Backends
    'Backend',
    'BackendKind',
    'ConsoleBackend',
    'FileBackend',
    'RedisBackend',
    'make_backend',
    # Errors
    'KlogError',
    'ConfigurationError',
    'WriteError',
    'FormatError',
    # Utilities
    'StreamLogger',
    'log_exception',
]
