"""
Flat-file persistence adapter.

``submissions.json`` holds the whole submission array and ``courses.json`` the
catalog. Every write rewrites the full file after copying the previous version
into the backup directory. All load-modify-save cycles run under one
re-entrant lock because FastAPI serves sync endpoints from a thread pool.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Optional

from intake.domain.records import Course, Submission
from intake.repositories.backups import BackupManager
from intake.repositories.base import Mutator, SubmissionRepository
from intake.repositories.errors import StorageError

logger = logging.getLogger(__name__)


class JsonRepository(SubmissionRepository):
    name = "json"

    def __init__(self, data_dir: Path, backups: BackupManager, *, strict: bool = False) -> None:
        self.data_dir = Path(data_dir)
        self.data_file = self.data_dir / "submissions.json"
        self.courses_file = self.data_dir / "courses.json"
        self.backups = backups
        self.strict = strict
        self._lock = threading.RLock()

    # -------------------------- raw file access --------------------------
    def _read_array(self, path: Path) -> list:
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as f:
                parsed = json.load(f)
        except (OSError, ValueError) as exc:
            if self.strict:
                raise StorageError(f"Could not read {path.name}: {exc}") from exc
            logger.warning("Unreadable %s treated as empty: %s", path.name, exc)
            return []
        if not isinstance(parsed, list):
            if self.strict:
                raise StorageError(f"{path.name} does not hold a JSON array")
            logger.warning("%s does not hold a JSON array; treated as empty", path.name)
            return []
        return parsed

    def _write_array(self, path: Path, rows: list) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".tmp")
            tmp.write_text(json.dumps(rows, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp.replace(path)
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"Could not write {path.name}: {exc}") from exc

    # -------------------------- submissions --------------------------
    def load(self) -> list[Submission]:
        with self._lock:
            return [Submission.from_dict(row) for row in self._read_array(self.data_file) if isinstance(row, dict)]

    def save(self, submissions: list[Submission]) -> None:
        with self._lock:
            self.backups.snapshot_file(self.data_file)
            self._write_array(self.data_file, [s.to_dict() for s in submissions])

    def get(self, submission_id: str) -> Optional[Submission]:
        for item in self.load():
            if item.id == submission_id:
                return item
        return None

    def add(self, submission: Submission) -> None:
        with self._lock:
            submissions = self.load()
            submissions.append(submission)
            self.save(submissions)

    def update(self, submission_id: str, mutator: Mutator) -> Optional[Submission]:
        with self._lock:
            submissions = self.load()
            for item in submissions:
                if item.id == submission_id:
                    mutator(item)
                    self.save(submissions)
                    return item
            return None

    def delete(self, submission_id: str) -> bool:
        with self._lock:
            submissions = self.load()
            remaining = [s for s in submissions if s.id != submission_id]
            if len(remaining) == len(submissions):
                return False
            self.save(remaining)
            return True

    def backup(self) -> str:
        with self._lock:
            return self.backups.snapshot_file(self.data_file)

    # -------------------------- courses --------------------------
    def list_courses(self) -> list[Course]:
        with self._lock:
            rows = self._read_array(self.courses_file)
            return sorted((Course.from_dict(r) for r in rows if isinstance(r, dict)), key=lambda c: c.id)

    def get_course(self, course_id: int) -> Optional[Course]:
        for course in self.list_courses():
            if course.id == course_id:
                return course
        return None

    def update_course(self, course_id: int, fields: dict) -> bool:
        with self._lock:
            rows = [r for r in self._read_array(self.courses_file) if isinstance(r, dict)]
            for row in rows:
                if int(row.get("id") or 0) == course_id:
                    row.update(fields)
                    row["id"] = course_id
                    self._write_array(self.courses_file, [Course.from_dict(r).to_dict() for r in rows])
                    return True
            return False

    def create_course(self, fields: dict) -> Course:
        with self._lock:
            rows = [r for r in self._read_array(self.courses_file) if isinstance(r, dict)]
            next_id = max((int(r.get("id") or 0) for r in rows), default=0) + 1
            course = Course.from_dict({**fields, "id": next_id})
            rows.append(course.to_dict())
            self._write_array(self.courses_file, rows)
            return course

    def seed_courses(self, defaults) -> int:
        with self._lock:
            if self.courses_file.exists() and self._read_array(self.courses_file):
                return 0
            rows = [Course.from_dict({**d, "id": i}).to_dict() for i, d in enumerate(defaults, start=1)]
            self._write_array(self.courses_file, rows)
            logger.info("Seeded %d initial courses", len(rows))
            return len(rows)
