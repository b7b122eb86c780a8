"""Course catalog read and admin bulk update."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from intake.domain.records import COURSE_FIELDS, Course
from intake.repositories import SubmissionRepository
from intake.services.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class BulkUpdateResult:
    updated: int = 0
    created: int = 0
    skipped: int = 0


def _clean_fields(entry: dict) -> dict:
    fields = {k: entry[k] for k in COURSE_FIELDS if k in entry}
    if "price" in fields:
        try:
            price = float(fields["price"])
        except (TypeError, ValueError):
            raise ValidationError("Course price must be a number")
        if price < 0:
            raise ValidationError("Course price must not be negative")
        fields["price"] = price
    return fields


def _course_id(entry: dict) -> int | None:
    raw = entry.get("id")
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Course id must be an integer")


class CourseService:
    """
    ``allow_create`` decides what happens to entries without an id: they are
    skipped unless COURSE_BULK_CREATE is switched on.
    """

    def __init__(self, repository: SubmissionRepository, *, allow_create: bool = False) -> None:
        self.repository = repository
        self.allow_create = allow_create

    def list(self) -> list[Course]:
        return self.repository.list_courses()

    def bulk_update(self, entries) -> BulkUpdateResult:
        if not isinstance(entries, list):
            raise ValidationError("Expected a list of courses")
        # Validate everything first so a bad entry leaves the catalog untouched.
        prepared = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise ValidationError("Each course must be an object")
            prepared.append((_course_id(entry), _clean_fields(entry)))

        result = BulkUpdateResult()
        for course_id, fields in prepared:
            if course_id is None:
                if self.allow_create and fields.get("name"):
                    self.repository.create_course(fields)
                    result.created += 1
                else:
                    result.skipped += 1
                continue
            if self.repository.update_course(course_id, fields):
                result.updated += 1
            else:
                result.skipped += 1
        logger.info(
            "Courses bulk update: %d updated, %d created, %d skipped",
            result.updated,
            result.created,
            result.skipped,
        )
        return result
