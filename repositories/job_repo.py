"""
repositories/job_repo.py
------------------------
Data access layer for job postings.
All SQL queries related to the `jobs` table live here.
"""

from typing import Optional

import psycopg2

from db.connection import ConnectionProvider
from db.errors import PersistenceError
from models.job import Job
from utils.logger import get_logger

logger = get_logger(__name__)


class JobRepository:
    """
    Repository for the jobs table.

    Each method opens its own connection, runs exactly one statement and
    releases the connection before returning, on success and on failure.
    Nothing is retried.
    """

    def __init__(self, provider: Optional[ConnectionProvider] = None):
        self.provider = provider or ConnectionProvider()

    # ── CREATE ────────────────────────────────────────────

    def create(self, job: Job) -> int:
        """
        Insert a new job posting.

        Args:
            job: The Job to persist. Its own ``id`` is ignored and the
                object is left untouched.

        Returns:
            The id assigned by the database.

        Raises:
            PersistenceError: If the insert fails.
        """
        sql = """
            INSERT INTO jobs (title, description, company)
            VALUES (%s, %s, %s)
            RETURNING id;
        """
        conn = self.provider.acquire()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (job.title, job.description, job.company))
                job_id = cur.fetchone()[0]
            conn.commit()
            logger.info(f"Added job #{job_id} '{job.title}' for {job.company}")
            return job_id
        except psycopg2.Error as e:
            self.provider.rollback(conn)
            logger.error(f"Failed to add job '{job.title}': {e}")
            raise PersistenceError(f"Could not save job '{job.title}'.", cause=e) from e
        finally:
            self.provider.release(conn)

    # ── READ ──────────────────────────────────────────────

    def list_all(self) -> list[Job]:
        """
        Fetch every job, most recent first.

        Returns:
            List of Job objects ordered by id descending; empty if there are none.
        """
        sql = "SELECT id, title, description, company FROM jobs ORDER BY id DESC;"
        conn = self.provider.acquire()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [self._row_to_job(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Failed to list jobs: {e}")
            raise PersistenceError("Could not load jobs.", cause=e) from e
        finally:
            self.provider.release(conn)

    def search_by_title(self, term: str) -> Optional[Job]:
        """
        Find one job whose title contains ``term``.

        Matching uses LIKE, so it is case-sensitive and ``%``/``_`` inside
        the term act as wildcards. An empty term matches every row. When
        several rows match, the oldest one is returned.

        Returns:
            A Job object or None if nothing matches.
        """
        sql = """
            SELECT id, title, description, company FROM jobs
            WHERE title LIKE %s
            ORDER BY id
            LIMIT 1;
        """
        conn = self.provider.acquire()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (f"%{term}%",))
                row = cur.fetchone()
                return self._row_to_job(row) if row else None
        except psycopg2.Error as e:
            logger.error(f"Failed to search jobs for '{term}': {e}")
            raise PersistenceError(f"Could not search jobs for '{term}'.", cause=e) from e
        finally:
            self.provider.release(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_job(row: tuple) -> Job:
        """Convert a database row tuple to a Job domain object."""
        return Job(
            id=row[0],
            title=row[1],
            description=row[2] or "",
            company=row[3],
        )
