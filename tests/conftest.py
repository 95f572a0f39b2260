"""
Pytest configuration and shared fixtures.

`FakeServer` stands in for a PostgreSQL server. Its connections understand
the statements the job portal issues and count every one of them, so tests
can check what reached the server without a real database.
"""

import re
import threading
import time
from collections import Counter
from typing import Optional

import psycopg2
import pytest
from psycopg2 import sql

from db.connection import ConnectionProvider
from db.context import DatabaseContext, DatabaseSettings
from repositories.job_repo import JobRepository

DB_NAME = "job_portal"


def _render(query) -> str:
    """Flatten a plain string or psycopg2.sql composition into text."""
    if isinstance(query, str):
        return query
    if isinstance(query, sql.Composed):
        return "".join(_render(part) for part in query.seq)
    if isinstance(query, sql.Identifier):
        return ".".join(f'"{s}"' for s in query.strings)
    if isinstance(query, sql.SQL):
        return query.string
    raise TypeError(f"Unsupported query type: {type(query)!r}")


def _like(pattern: str, value: str) -> bool:
    """Case-sensitive SQL LIKE."""
    regex = "".join(
        ".*" if ch == "%" else "." if ch == "_" else re.escape(ch) for ch in pattern
    )
    return re.fullmatch(regex, value, flags=re.DOTALL) is not None


class FakeServer:
    """In-memory PostgreSQL server shared by all fake connections."""

    def __init__(self):
        self.lock = threading.Lock()
        self.databases = {"postgres"}
        self.tables: set[tuple[str, str]] = set()
        self.jobs: list[tuple] = []
        self.next_id = 1
        self.statements = Counter()
        self.connect_calls = 0
        self.opened = 0
        self.closed = 0
        self.create_delay = 0.0
        self.fail_connect_on: set[int] = set()
        self.fail_statement: dict[str, Exception] = {}
        self.fail_rollback: Optional[Exception] = None

    def connect(self, **params):
        with self.lock:
            self.connect_calls += 1
            call = self.connect_calls
            if call in self.fail_connect_on:
                raise psycopg2.OperationalError(f"connection refused (call {call})")
            if params["dbname"] not in self.databases:
                raise psycopg2.OperationalError(f'database "{params["dbname"]}" does not exist')
            self.opened += 1
        return FakeConnection(self, params["dbname"])

    def count(self, kind: str) -> int:
        return self.statements[kind]


class FakeConnection:
    def __init__(self, server: FakeServer, dbname: str):
        self.server = server
        self.dbname = dbname
        self.autocommit = False
        self.closed = False
        self.pending: list[tuple] = []
        self.commits = 0
        self.rollbacks = 0

    def cursor(self):
        if self.closed:
            raise psycopg2.InterfaceError("connection already closed")
        return FakeCursor(self)

    def commit(self):
        with self.server.lock:
            self.server.jobs.extend(self.pending)
        self.pending = []
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1
        if self.server.fail_rollback is not None:
            raise self.server.fail_rollback
        self.pending = []

    def close(self):
        if not self.closed:
            self.closed = True
            with self.server.lock:
                self.server.closed += 1


class FakeCursor:
    def __init__(self, conn: FakeConnection):
        self.conn = conn
        self.server = conn.server
        self._rows: list[tuple] = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, params=None):
        text = " ".join(_render(query).split())
        kind = self._classify(text)
        with self.server.lock:
            self.server.statements[kind] += 1
            failure = self.server.fail_statement.pop(kind, None)
        if failure is not None:
            raise failure
        getattr(self, f"_do_{kind}")(text, params)

    def fetchone(self) -> Optional[tuple]:
        return self._rows.pop(0) if self._rows else None

    def fetchall(self) -> list[tuple]:
        rows, self._rows = self._rows, []
        return rows

    @staticmethod
    def _classify(text: str) -> str:
        if "FROM pg_database" in text:
            return "database_exists"
        if text.startswith("CREATE DATABASE"):
            return "create_database"
        if "CREATE TABLE IF NOT EXISTS jobs" in text:
            return "create_tables"
        if text.startswith("INSERT INTO jobs"):
            return "insert"
        if "FROM jobs WHERE title LIKE" in text:
            return "search"
        if "FROM jobs ORDER BY id DESC" in text:
            return "list"
        raise psycopg2.ProgrammingError(f"unexpected statement: {text}")

    def _require_jobs_table(self):
        if (self.conn.dbname, "jobs") not in self.server.tables:
            raise psycopg2.ProgrammingError('relation "jobs" does not exist')

    def _do_database_exists(self, text, params):
        self._rows = [(1,)] if params[0] in self.server.databases else []

    def _do_create_database(self, text, params):
        if not self.conn.autocommit:
            raise psycopg2.InternalError("CREATE DATABASE cannot run inside a transaction block")
        name = re.search(r'CREATE DATABASE "(.+)"', text).group(1)
        with self.server.lock:
            if name in self.server.databases:
                raise psycopg2.ProgrammingError(f'database "{name}" already exists')
            self.server.databases.add(name)

    def _do_create_tables(self, text, params):
        time.sleep(self.server.create_delay)
        with self.server.lock:
            self.server.tables.add((self.conn.dbname, "jobs"))
            self.server.tables.add((self.conn.dbname, "users"))

    def _do_insert(self, text, params):
        self._require_jobs_table()
        title, description, company = params
        if title is None or company is None:
            raise psycopg2.IntegrityError("null value violates not-null constraint")
        if len(title) > 100 or len(company) > 100:
            raise psycopg2.DataError("value too long for type character varying(100)")
        with self.server.lock:
            job_id = self.server.next_id
            self.server.next_id += 1
        self.conn.pending.append((job_id, title, description, company))
        self._rows = [(job_id,)]

    def _do_list(self, text, params):
        self._require_jobs_table()
        with self.server.lock:
            self._rows = sorted(self.server.jobs, key=lambda r: r[0], reverse=True)

    def _do_search(self, text, params):
        self._require_jobs_table()
        with self.server.lock:
            rows = sorted(self.server.jobs, key=lambda r: r[0])
        self._rows = [r for r in rows if _like(params[0], r[1])][:1]


@pytest.fixture
def server() -> FakeServer:
    """A fresh fake server with no job portal database yet."""
    return FakeServer()


@pytest.fixture
def context(server) -> DatabaseContext:
    """A database context wired to the fake server."""
    return DatabaseContext(settings=DatabaseSettings(db_name=DB_NAME), connect=server.connect)


@pytest.fixture
def provider(context) -> ConnectionProvider:
    return ConnectionProvider(context)


@pytest.fixture
def repo(provider) -> JobRepository:
    return JobRepository(provider)
