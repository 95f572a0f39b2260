"""
db/connection.py
----------------
Hands out connections to the target database.

Every call opens a fresh connection that belongs to the caller until it is
released; nothing is pooled or shared between threads. The schema is created
on first use.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2

from db.context import DatabaseContext, get_default_context
from db.errors import DatabaseConnectionError
from db.init_db import ensure_ready
from utils.logger import get_logger

logger = get_logger(__name__)


class ConnectionProvider:
    """Opens and closes connections for one DatabaseContext."""

    def __init__(self, context: Optional[DatabaseContext] = None):
        self.context = context or get_default_context()

    def acquire(self):
        """
        Open a new connection to the target database.

        Returns:
            A psycopg2 connection object. The caller must release it.

        Raises:
            DatabaseConnectionError: If setup or connecting fails.
        """
        if not self.context.ready:
            ensure_ready(self.context)
        try:
            return self.context.open_database_connection()
        except psycopg2.Error as e:
            logger.error(f"Failed to connect to '{self.context.settings.db_name}': {e}")
            raise DatabaseConnectionError(
                "Database connection or setup failed. Check credentials and server status.",
                cause=e,
            ) from e

    def release(self, conn) -> None:
        """
        Close a connection obtained from `acquire`.

        Args:
            conn: The psycopg2 connection to release.
        """
        try:
            conn.close()
        except psycopg2.Error as e:
            logger.warning(f"Error while closing connection: {e}")

    def rollback(self, conn) -> None:
        """
        Roll back the open transaction on a connection.

        A connection the server already dropped cannot be rolled back; the
        error is logged so the failure that caused the rollback is the one
        the caller sees.
        """
        try:
            conn.rollback()
        except psycopg2.Error as e:
            logger.warning(f"Rollback failed: {e}")

    @contextmanager
    def connection(self) -> Iterator:
        """Acquire a connection for the duration of a ``with`` block."""
        conn = self.acquire()
        try:
            yield conn
        finally:
            self.release(conn)
