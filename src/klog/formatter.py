"""Turn a log call into the bytes handed to a backend.

Terminal-style backends receive

    <prefix><date time> <file:line> <label> <message>\\n

with the body optionally wrapped in the severity color. Plain backends
(the redis sink) receive `<label>\\t<message>` and nothing else.
"""
from __future__ import annotations

import datetime
import os
import sys
from collections.abc import Mapping, Sequence
from typing import Any

from klog.flags import Flag
from klog.styles import Severity, label, paint

__all__ = ['timestamp', 'find_caller', 'render', 'format_record']

DATE_FORMAT = '%Y/%m/%d'
TIME_FORMAT = '%H:%M:%S'


def timestamp(flags: int, now: datetime.datetime | None = None) -> str:
    """Local time rendered according to the DATE and TIME flags.

    >>> when = datetime.datetime(2024, 1, 2, 3, 4, 5)
    >>> timestamp(Flag.DATETIME, when)
    '2024/01/02 03:04:05'
    >>> timestamp(Flag.TIME, when)
    '03:04:05'
    >>> timestamp(Flag.COLOR, when)
    ''
    """
    parts = []
    if flags & Flag.DATE:
        parts.append(DATE_FORMAT)
    if flags & Flag.TIME:
        parts.append(TIME_FORMAT)
    if not parts:
        return ''
    now = now or datetime.datetime.now()
    return now.strftime(' '.join(parts))


def find_caller(calldepth: int) -> tuple[str, int]:
    """Basename and line of the frame `calldepth` levels above our caller.

    Returns ('<unknown>', -1) when the stack is not that deep.
    """
    try:
        frame = sys._getframe(calldepth + 1)
    except ValueError:
        return '<unknown>', -1
    return os.path.basename(frame.f_code.co_filename), frame.f_lineno


def render(fmt: str, args: Sequence[Any]) -> str:
    """Render the message text of a call, without the label.

    An empty template joins the arguments with spaces. Otherwise the
    template is %-interpolated, like the stdlib logging module does.

    >>> render('', ('disk', 'full', 95))
    'disk full 95'
    >>> render('%s is %d%% full', ('disk', 95))
    'disk is 95% full'
    >>> render('%(name)s', ({'name': 'db'},))
    'db'
    >>> render('100%', ())
    '100%'
    >>> render('%d items', ('many',))
    '%d items many'
    """
    if not fmt:
        return ' '.join(str(arg) for arg in args)
    if not args:
        return fmt
    values = args[0] if len(args) == 1 and isinstance(args[0], Mapping) and args[0] else tuple(args)
    try:
        return fmt % values
    except (TypeError, ValueError, KeyError):
        return ' '.join([fmt, *(str(arg) for arg in args)])


def format_record(
    level: Severity,
    fmt: str,
    args: Sequence[Any],
    *,
    flags: int,
    prefix: str = '',
    color: bool = False,
    plain: bool = False,
    calldepth: int = 1,
    caller: tuple[str, int] | None = None,
) -> bytes:
    """Build the bytes for one log call.

    Args:
        level: severity of the call
        fmt: printf-style template, empty to join args with spaces
        args: template arguments
        flags: Flag bitmask of enabled decorations
        prefix: user prefix placed before the timestamp
        color: whether the logger may emit color escapes at all
        plain: backend wants `<label>\\t<message>` with no decoration
        calldepth: frames between this function and the user call site
        caller: (filename, line) to use instead of inspecting the stack
    """
    message = render(fmt, args)
    name = label(level)
    if plain:
        return f'{name}\t{message}'.encode('utf-8')

    head = prefix
    if flags & Flag.DATETIME:
        head += timestamp(flags)
    if flags & Flag.SHORTFILE:
        filename, lineno = caller or find_caller(calldepth)
        head = f'{head} {filename}:{lineno}'

    body = f'{name} {message}' if fmt or args else name
    if not body.endswith('\n'):
        body += '\n'
    if color and flags & Flag.COLOR:
        body = paint(level, body)
    return f'{head} {body}'.encode('utf-8')


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
