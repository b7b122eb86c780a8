"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import logging
import threading
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError

from intake.core.utils import utc_now_iso
from intake.db.models import CourseRow, SubmissionRow
from intake.db.session import Base, get_engine, get_session
from intake.domain.records import Course, Submission
from intake.repositories.backups import BackupManager
from intake.repositories.base import Mutator, SubmissionRepository
from intake.repositories.errors import StorageError

logger = logging.getLogger(__name__)


def _to_submission(row: SubmissionRow) -> Submission:
    subjects = row.subjects
    if isinstance(subjects, str):
        subjects = [s.strip() for s in subjects.split(",") if s.strip()]
    return Submission(
        id=row.id,
        parent_name=row.parent_name or "",
        parent_email=row.parent_email or "",
        parent_phone=row.parent_phone or "",
        student_name=row.student_name or "",
        student_dob=row.student_dob or "",
        subjects=list(subjects or []),
        relationship=row.relationship or "",
        student_email=row.student_email or "",
        specific_needs=row.specific_needs or "",
        discovery_source=row.discovery_source or "",
        is_charity=row.is_charity,
        submitted_at=row.submitted_at or "",
        is_trashed=row.is_trashed,
        trashed_at=(row.trashed_at or row.submitted_at or utc_now_iso()) if row.is_trashed else None,
    )


def _apply(row: SubmissionRow, item: Submission) -> None:
    row.parent_name = item.parent_name
    row.parent_email = item.parent_email
    row.parent_phone = item.parent_phone
    row.student_name = item.student_name
    row.student_email = item.student_email
    row.student_dob = item.student_dob
    row.relationship = item.relationship
    row.specific_needs = item.specific_needs
    row.subjects = list(item.subjects)
    row.discovery_source = item.discovery_source
    row.is_charity = item.is_charity
    row.submitted_at = item.submitted_at
    row.is_trashed = item.is_trashed
    row.trashed_at = item.trashed_at


def _to_course(row: CourseRow) -> Course:
    return Course(
        id=row.id,
        name=row.name or "",
        price=float(row.price or 0),
        duration=row.duration or "",
        syllabus=row.syllabus or "",
        is_free_trial=row.is_free_trial,
        is_charity=row.is_charity,
    )


def _apply_course(row: CourseRow, course: Course) -> None:
    row.name = course.name
    row.price = course.price
    row.duration = course.duration
    row.syllabus = course.syllabus
    row.is_free_trial = course.is_free_trial
    row.is_charity = course.is_charity


class SQLRepository(SubmissionRepository):
    """
    Per-record CRUD over the ``submissions`` and ``courses`` tables.

    Writes take one re-entrant lock so the snapshot, the ``seq`` allocation and
    the commit of a mutation are not interleaved with another thread's.
    """

    name = "sql"

    def __init__(
        self,
        backups: BackupManager,
        *,
        database_url: Optional[str] = None,
        create_schema: bool = True,
    ) -> None:
        self.backups = backups
        self.database_url = database_url
        self._lock = threading.RLock()
        if create_schema:
            try:
                Base.metadata.create_all(bind=get_engine(database_url))
            except SQLAlchemyError as exc:
                raise StorageError(f"Could not initialise database: {exc}") from exc

    def _session(self):
        return get_session(self.database_url)

    def _snapshot(self, session) -> str:
        rows = session.execute(select(SubmissionRow).order_by(SubmissionRow.seq)).scalars().all()
        return self.backups.snapshot_records(_to_submission(r).to_dict() for r in rows)

    # -------------------------- submissions --------------------------
    def load(self) -> list[Submission]:
        try:
            with self._session() as session:
                rows = session.execute(select(SubmissionRow).order_by(SubmissionRow.seq)).scalars().all()
                return [_to_submission(r) for r in rows]
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not load submissions: {exc}") from exc

    def save(self, submissions: list[Submission]) -> None:
        try:
            with self._lock, self._session() as session:
                self._snapshot(session)
                session.expunge_all()
                session.execute(delete(SubmissionRow).execution_options(synchronize_session=False))
                for seq, item in enumerate(submissions, start=1):
                    row = SubmissionRow(id=item.id, seq=seq)
                    _apply(row, item)
                    session.add(row)
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not save submissions: {exc}") from exc

    def get(self, submission_id: str) -> Optional[Submission]:
        try:
            with self._session() as session:
                row = session.get(SubmissionRow, submission_id)
                return _to_submission(row) if row else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not read submission: {exc}") from exc

    def add(self, submission: Submission) -> None:
        try:
            with self._lock, self._session() as session:
                self._snapshot(session)
                last = session.execute(select(func.max(SubmissionRow.seq))).scalar() or 0
                row = SubmissionRow(id=submission.id, seq=last + 1)
                _apply(row, submission)
                session.add(row)
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not save submission: {exc}") from exc

    def update(self, submission_id: str, mutator: Mutator) -> Optional[Submission]:
        try:
            with self._lock, self._session() as session:
                row = session.get(SubmissionRow, submission_id)
                if not row:
                    return None
                self._snapshot(session)
                item = _to_submission(row)
                mutator(item)
                _apply(row, item)
                session.commit()
                return item
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not update submission: {exc}") from exc

    def delete(self, submission_id: str) -> bool:
        try:
            with self._lock, self._session() as session:
                if not session.get(SubmissionRow, submission_id):
                    return False
                self._snapshot(session)
                session.execute(delete(SubmissionRow).where(SubmissionRow.id == submission_id))
                session.commit()
                return True
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not delete submission: {exc}") from exc

    def backup(self) -> str:
        try:
            with self._lock, self._session() as session:
                return self._snapshot(session)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not back up submissions: {exc}") from exc

    # -------------------------- courses --------------------------
    def list_courses(self) -> list[Course]:
        try:
            with self._session() as session:
                rows = session.execute(select(CourseRow).order_by(CourseRow.id)).scalars().all()
                return [_to_course(r) for r in rows]
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not load courses: {exc}") from exc

    def get_course(self, course_id: int) -> Optional[Course]:
        try:
            with self._session() as session:
                row = session.get(CourseRow, course_id)
                return _to_course(row) if row else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not read course: {exc}") from exc

    def update_course(self, course_id: int, fields: dict) -> bool:
        try:
            with self._lock, self._session() as session:
                row = session.get(CourseRow, course_id)
                if not row:
                    return False
                merged = Course.from_dict({**_to_course(row).to_dict(), **fields, "id": course_id})
                _apply_course(row, merged)
                session.commit()
                return True
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not update course: {exc}") from exc

    def create_course(self, fields: dict) -> Course:
        course = Course.from_dict({**fields, "id": 0})
        try:
            with self._lock, self._session() as session:
                row = CourseRow()
                _apply_course(row, course)
                session.add(row)
                session.commit()
                return _to_course(row)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not create course: {exc}") from exc

    def seed_courses(self, defaults) -> int:
        try:
            with self._lock, self._session() as session:
                count = session.execute(select(func.count()).select_from(CourseRow)).scalar() or 0
                if count:
                    return 0
                for data in defaults:
                    row = CourseRow()
                    _apply_course(row, Course.from_dict({**data, "id": 0}))
                    session.add(row)
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not seed courses: {exc}") from exc
        logger.info("Seeded %d initial courses", len(defaults))
        return len(defaults)
