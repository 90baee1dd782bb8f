"""Output style flags."""
from enum import IntFlag

__all__ = ['Flag']


class Flag(IntFlag):
    """Bitmask toggling the decorations of each line.
    """
    SHORTFILE = 1  # basename:lineno of the caller
    DATE = 2
    TIME = 4
    COLOR = 8

    DATETIME = DATE | TIME
    DEVFLAG = DATETIME | SHORTFILE | COLOR
    STDFLAG = DATETIME | COLOR
