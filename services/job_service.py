"""
services/job_service.py
-----------------------
Entry points used by the handlers to post, list and search jobs.
Each call returns immediately with a TaskHandle; the repository call runs
on a worker thread.
"""

from typing import Optional

from models.job import Job
from repositories.job_repo import JobRepository
from services.task_runner import TaskHandle, TaskRunner
from utils.logger import get_logger

logger = get_logger(__name__)


class JobService:
    """Submits job repository operations to a TaskRunner."""

    def __init__(self, runner: TaskRunner, repository: Optional[JobRepository] = None):
        self.runner = runner
        self.repository = repository or JobRepository()

    def submit_create(self, title: str, description: str, company: str) -> TaskHandle[int]:
        """
        Post a new job. Title and company must already be validated as non-empty.

        Returns:
            Handle resolving to the new job's id, or to the PersistenceError.
        """
        job = Job(title=title, description=description, company=company)
        return self.runner.submit(self.repository.create, job, name="create_job")

    def submit_list(self) -> TaskHandle[list[Job]]:
        """Handle resolving to every job, most recent first."""
        return self.runner.submit(self.repository.list_all, name="list_jobs")

    def submit_search(self, term: str) -> TaskHandle[Optional[Job]]:
        """Handle resolving to the first job whose title contains ``term``, or None."""
        return self.runner.submit(self.repository.search_by_title, term, name="search_jobs")

    def submit_warmup(self) -> TaskHandle[None]:
        """Create the schema in the background so the first real request is fast."""
        return self.runner.submit(self._warmup, name="warmup")

    def _warmup(self) -> None:
        with self.repository.provider.connection():
            logger.info("Database is ready.")
