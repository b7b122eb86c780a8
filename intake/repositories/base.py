"""Storage contract implemented by the JSON and SQL backends."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional

from intake.domain.records import Course, Submission

Mutator = Callable[[Submission], None]


class SubmissionRepository(ABC):
    """
    Submissions, courses and backups behind one interface.

    ``save`` replaces the whole collection; the single-record helpers exist so
    services never need to load-modify-save themselves. Every mutation takes
    a backup of the prior state first.
    """

    name = "base"

    # -------------------------- submissions --------------------------
    @abstractmethod
    def load(self) -> list[Submission]: ...

    @abstractmethod
    def save(self, submissions: list[Submission]) -> None: ...

    @abstractmethod
    def get(self, submission_id: str) -> Optional[Submission]: ...

    @abstractmethod
    def add(self, submission: Submission) -> None: ...

    @abstractmethod
    def update(self, submission_id: str, mutator: Mutator) -> Optional[Submission]: ...

    @abstractmethod
    def delete(self, submission_id: str) -> bool: ...

    @abstractmethod
    def backup(self) -> str: ...

    # -------------------------- courses --------------------------
    @abstractmethod
    def list_courses(self) -> list[Course]: ...

    @abstractmethod
    def get_course(self, course_id: int) -> Optional[Course]: ...

    @abstractmethod
    def update_course(self, course_id: int, fields: dict) -> bool: ...

    @abstractmethod
    def create_course(self, fields: dict) -> Course: ...

    @abstractmethod
    def seed_courses(self, defaults) -> int: ...
