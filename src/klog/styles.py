"""Severity levels and their display tables.

LEVELS and COLORS are indexed by Severity and must stay the same length
as the enumeration.
"""
from __future__ import annotations

from enum import IntEnum

from colorama import Fore, Style

__all__ = ['Severity', 'LEVELS', 'COLORS', 'label', 'color', 'paint', 'to_severity']


class Severity(IntEnum):
    """Ordered log severities."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    FATAL = 4


LEVELS = (
    '[DEBUG]',
    '[INFO]',
    '[WARN]',
    '[ERROR]',
    '[FATAL]',
)

COLORS = (
    Fore.CYAN,
    Fore.GREEN,
    Fore.YELLOW,
    Fore.RED,
    Fore.MAGENTA,
)

_ALIASES = {
    'WARN': Severity.WARNING,
    'CRITICAL': Severity.FATAL,
}


def label(level: Severity) -> str:
    return LEVELS[level]


def color(level: Severity) -> str:
    return COLORS[level]


def paint(level: Severity, text: str) -> str:
    """Wrap text in the escape sequence of the given severity.
    """
    return f'{COLORS[level]}{text}{Style.RESET_ALL}'


def to_severity(level: Severity | int | str) -> Severity:
    """Coerce a severity, its integer value or its name to Severity.

    >>> to_severity('warn')
    <Severity.WARNING: 2>
    >>> to_severity(3)
    <Severity.ERROR: 3>
    """
    if isinstance(level, str):
        name = level.strip().upper()
        if name in _ALIASES:
            return _ALIASES[name]
        try:
            return Severity[name]
        except KeyError:
            raise ValueError(f'Unknown severity: {level!r}') from None
    return Severity(level)


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
