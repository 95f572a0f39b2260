"""
db/context.py
-------------
Process-wide database context.

Holds the connection settings, the driver's connect factory, and the schema
readiness state with the lock that guards it. A context is created once and
never torn down; `get_default_context()` returns the instance built from
config.py. Tests build their own context with a stub ``connect``.
"""

import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

import psycopg2

import config


@dataclass(frozen=True)
class DatabaseSettings:
    """
    Connection settings for the PostgreSQL server.

    Attributes:
        host: Server address.
        port: Server port.
        db_name: Target database identifier.
        user: Login role.
        password: Login password.
        maintenance_db: Database used when no target database is selected.
    """
    host: str = "localhost"
    port: int = 5432
    db_name: str = "job_portal"
    user: str = "postgres"
    password: str = ""
    maintenance_db: str = "postgres"

    @classmethod
    def from_config(cls) -> "DatabaseSettings":
        """Build settings from the values loaded by config.py."""
        return cls(
            host=config.DB_HOST,
            port=config.DB_PORT,
            db_name=config.DB_NAME,
            user=config.DB_USER,
            password=config.DB_PASS,
            maintenance_db=config.DB_MAINTENANCE_NAME,
        )

    def server_params(self) -> dict:
        """Connection keywords for a server-scoped connection."""
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "dbname": self.maintenance_db,
        }

    def database_params(self) -> dict:
        """Connection keywords for a connection to the target database."""
        return {**self.server_params(), "dbname": self.db_name}


class DatabaseContext:
    """
    Settings, connect factory and schema readiness for one process.

    ``ready`` flips to True exactly once, after the database and its tables
    have been created; only `db.init_db.ensure_ready` sets it, and only while
    holding ``lock``.
    """

    def __init__(
        self,
        settings: Optional[DatabaseSettings] = None,
        connect: Optional[Callable[..., Any]] = None,
    ):
        self.settings = settings or DatabaseSettings.from_config()
        self.connect = connect or psycopg2.connect
        self.lock = threading.Lock()
        self.ready = False

    def open_server_connection(self):
        """Open a connection with no target database selected."""
        return self.connect(**self.settings.server_params())

    def open_database_connection(self):
        """Open a connection to the target database."""
        return self.connect(**self.settings.database_params())


_default_context: Optional[DatabaseContext] = None
_default_lock = threading.Lock()


def get_default_context() -> DatabaseContext:
    """Return the process-wide context, creating it on first use."""
    global _default_context
    with _default_lock:
        if _default_context is None:
            _default_context = DatabaseContext()
        return _default_context
