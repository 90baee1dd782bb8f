"""Exceptions raised by klog."""

__all__ = ['KlogError', 'ConfigurationError', 'WriteError', 'FormatError']


class KlogError(Exception):
    """Base class for klog errors."""


class ConfigurationError(KlogError):
    """A backend could not be constructed.

    The logger keeps its previous backend when this is raised.
    """


class WriteError(KlogError, OSError):
    """The backend failed to write a record."""


class FormatError(KlogError, ValueError):
    """A payload does not have the shape a backend expects."""
