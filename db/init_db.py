"""
db/init_db.py
-------------
Creates the target database and its tables if they do not already exist.

`ensure_ready()` runs the full sequence at most once per process, even when
several worker threads reach it at the same time. Run this module directly
to provision a fresh server:
    python -m db.init_db
"""

from typing import Optional

import psycopg2
from psycopg2 import sql

from db.context import DatabaseContext, get_default_context
from db.errors import DatabaseConnectionError
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Jobs table: every posting recorded by an employer
CREATE TABLE IF NOT EXISTS jobs (
    id              SERIAL PRIMARY KEY,
    title           VARCHAR(100) NOT NULL,
    description     TEXT,
    company         VARCHAR(100) NOT NULL
);

-- Users table: provisioned for portal accounts, not read or written yet
CREATE TABLE IF NOT EXISTS users (
    id              SERIAL PRIMARY KEY,
    name            VARCHAR(100) NOT NULL,
    email           VARCHAR(100) NOT NULL UNIQUE,
    user_type       VARCHAR(10) NOT NULL CHECK (user_type IN ('Employer', 'JobSeeker'))
);
"""

DATABASE_EXISTS_SQL = "SELECT 1 FROM pg_database WHERE datname = %s;"


def create_database(context: DatabaseContext) -> None:
    """
    Create the target database on the server unless it already exists.

    PostgreSQL has no ``CREATE DATABASE IF NOT EXISTS`` and refuses to run
    ``CREATE DATABASE`` inside a transaction, so the check runs first on an
    autocommit connection.
    """
    db_name = context.settings.db_name
    conn = context.open_server_connection()
    try:
        conn.autocommit = True
        with conn.cursor() as cur:
            cur.execute(DATABASE_EXISTS_SQL, (db_name,))
            if cur.fetchone() is None:
                cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(db_name)))
                logger.info(f"Created database '{db_name}'.")
    finally:
        conn.close()


def create_tables(context: DatabaseContext) -> None:
    """
    Execute the schema SQL against the target database.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = context.open_database_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
    except Exception:
        try:
            conn.rollback()
        except psycopg2.Error as rollback_error:
            logger.warning(f"Rollback failed: {rollback_error}")
        raise
    finally:
        conn.close()


def ensure_ready(context: Optional[DatabaseContext] = None) -> None:
    """
    Make sure the database and its tables exist, once per process.

    The readiness flag is checked before taking the lock as a shortcut and
    checked again under it; only the second check decides. On failure the
    flag stays unset, so the next caller starts the whole sequence over.

    Raises:
        DatabaseConnectionError: If the server is unreachable or a creation
            statement fails.
    """
    context = context or get_default_context()
    if context.ready:
        return

    with context.lock:
        if context.ready:
            return
        logger.info(f"Initializing database '{context.settings.db_name}'...")
        try:
            create_database(context)
            create_tables(context)
        except psycopg2.Error as e:
            logger.error(f"Failed to initialize schema: {e}")
            raise DatabaseConnectionError(
                "Database connection or setup failed. Check credentials and server status.",
                cause=e,
            ) from e
        context.ready = True
        logger.info("Database schema initialized successfully.")


if __name__ == "__main__":
    ensure_ready()
    print("✅ Database schema created successfully.")
