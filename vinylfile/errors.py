"""Exceptions raised by virtual file objects.

Every fault is a programmer error raised synchronously at the call site.
The classes also derive from the builtin exception that best describes the
fault, so callers can catch either.
"""


class VinylError(Exception):
    """Base class for all virtual file errors."""


class InvalidArgument(VinylError, ValueError):
    """A setter, the constructor or clone() received a bad type or value."""


class InvalidState(VinylError, RuntimeError):
    """A derived property was used before ``path`` was set."""


class InvalidOperation(VinylError, AttributeError):
    """A read-only derived property was assigned."""
