"""
models/job.py
-------------
Domain model for job postings.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Job:
    """
    Represents a single job posting.

    Attributes:
        title: Job title (required, at most 100 characters when stored).
        description: Free text, may be empty.
        company: Name of the posting company (required).
        id: Database primary key; 0 until the store assigns one.
    """
    title: str
    description: str
    company: str
    id: int = 0

    def is_persisted(self) -> bool:
        """Returns True if the store has assigned this job an id."""
        return self.id > 0

    def __str__(self) -> str:
        return (
            f"ID: {self.id}\n"
            f"Title: {self.title}\n"
            f"Company: {self.company}\n"
            f"Description: {self.description}\n"
        )
