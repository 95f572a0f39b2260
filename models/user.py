"""
models/user.py
--------------
Portal users. Only employers are modelled; they supply the company name of
the jobs they post.
"""

from dataclasses import dataclass
from typing import Protocol

from models.job import Job


class PortalUser(Protocol):
    """Anyone who interacts with the portal."""
    name: str

    @property
    def role(self) -> str:
        """Role name as stored in ``users.user_type``."""
        ...


@dataclass(frozen=True)
class Employer:
    """A company account that posts jobs."""
    name: str
    email: str

    @property
    def role(self) -> str:
        return "Employer"

    def new_job(self, title: str, description: str) -> Job:
        """Build an unsaved Job posted by this employer."""
        return Job(title=title, description=description, company=self.name)
