"""
db/errors.py
------------
Error taxonomy for the persistence layer.
Low-level driver exceptions never leave this layer unwrapped; the original
error is chained as ``__cause__`` and also kept on ``.cause``.
"""

from typing import Optional


class JobPortalError(Exception):
    """Base class for every error raised by the job portal core."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class PersistenceError(JobPortalError):
    """A statement failed after a connection was obtained."""


class DatabaseConnectionError(PersistenceError):
    """The store could not be reached, authenticated against, or initialized."""
