"""Registration intake and the trash/restore/purge lifecycle."""

from __future__ import annotations

import logging
import uuid
from typing import Callable, Optional

from intake.core.utils import has_text, utc_now_iso
from intake.domain.records import Submission
from intake.repositories import SubmissionRepository
from intake.services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("parentName", "parentEmail", "parentPhone", "studentName", "studentDob")

TRASHED_FILTERS = {"active", "true", "all"}
KIND_FILTERS = {"charity", "standard"}


class SubmissionService:
    def __init__(self, repository: SubmissionRepository, clock: Callable[[], str] = utc_now_iso) -> None:
        self.repository = repository
        self._clock = clock

    # -------------------------------------- intake --------------------------------------
    def submit(self, payload) -> Submission:
        if not isinstance(payload, dict):
            raise ValidationError("Invalid submission payload")
        missing = [name for name in REQUIRED_FIELDS if not has_text(payload.get(name))]
        subjects = payload.get("subjects")
        if missing or not isinstance(subjects, list) or not [s for s in subjects if has_text(s)]:
            raise ValidationError("Missing required fields")

        record = Submission.from_dict(payload)
        record.id = str(uuid.uuid4())
        record.submitted_at = self._clock()
        record.mark_restored()
        self.repository.add(record)
        logger.info("New submission received: %s", record.id)
        return record

    # -------------------------------------- admin reads --------------------------------------
    def list(self, trashed: Optional[str] = None, kind: Optional[str] = None) -> list[Submission]:
        mode = (trashed or "active").strip().lower()
        if mode not in TRASHED_FILTERS:
            mode = "active"
        kind_norm = (kind or "").strip().lower()

        items = []
        for item in self.repository.load():
            if mode == "active" and item.is_trashed:
                continue
            if mode == "true" and not item.is_trashed:
                continue
            if kind_norm == "charity" and not item.is_charity:
                continue
            if kind_norm == "standard" and item.is_charity:
                continue
            items.append(item)
        return sorted(items, key=lambda s: s.sort_key, reverse=True)

    def get(self, submission_id: str) -> Submission:
        item = self.repository.get(submission_id)
        if not item:
            raise NotFoundError("Not found")
        return item

    # -------------------------------------- lifecycle --------------------------------------
    def trash(self, submission_id: str) -> Submission:
        when = self._clock()
        item = self.repository.update(submission_id, lambda s: s.mark_trashed(when))
        if not item:
            raise NotFoundError("Not found")
        logger.info("Submission trashed: %s", submission_id)
        return item

    def restore(self, submission_id: str) -> Submission:
        item = self.repository.update(submission_id, lambda s: s.mark_restored())
        if not item:
            raise NotFoundError("Not found")
        logger.info("Submission restored: %s", submission_id)
        return item

    def purge(self, submission_id: str) -> None:
        if not self.repository.delete(submission_id):
            raise NotFoundError("Not found")
        logger.info("Submission permanently deleted: %s", submission_id)

    def backup(self) -> str:
        return self.repository.backup()
