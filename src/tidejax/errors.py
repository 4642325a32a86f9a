"""Exception types raised by tidejax.

All errors are raised at the point of detection and carry the offending
time or value in their message.  Each type also derives from the builtin
exception a caller would naturally catch (``ValueError`` for bad input,
``ImportError`` for a missing optional package).
"""

from __future__ import annotations


class TidejaxError(Exception):
    """Base class for all tidejax errors."""


class OutOfRangeError(TidejaxError, ValueError):
    """A query time lies outside the loaded Earth orientation coverage."""


class MalformedInputError(TidejaxError, ValueError):
    """A data table violates its shape, column or ordering precondition."""


class MissingDependencyError(TidejaxError, ImportError):
    """An optional dependency required by the requested computation is absent."""
