"""Domain records for submissions and courses, plus their JSON shape."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from intake.core.utils import as_bool, parse_timestamp, utc_now_iso


def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _subjects(value) -> list[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return []
    return [str(s).strip() for s in value if str(s).strip()]


@dataclass
class Submission:
    id: str
    parent_name: str
    parent_email: str
    parent_phone: str
    student_name: str
    student_dob: str
    subjects: list[str] = field(default_factory=list)
    relationship: str = ""
    student_email: str = ""
    specific_needs: str = ""
    discovery_source: str = ""
    is_charity: bool = False
    submitted_at: str = ""
    is_trashed: bool = False
    trashed_at: Optional[str] = None

    @property
    def sort_key(self) -> float:
        return parse_timestamp(self.submitted_at)

    def mark_trashed(self, when: str) -> None:
        self.is_trashed = True
        self.trashed_at = when

    def mark_restored(self) -> None:
        self.is_trashed = False
        self.trashed_at = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Submission":
        """Decode a stored record, accepting the legacy key names."""
        trashed = as_bool(data.get("isTrashed")) or as_bool(data.get("isArchived"))
        submitted_at = _text(data.get("submittedAt") or data.get("createdAt"))
        trashed_at = None
        if trashed:
            # trashedAt is set whenever the record is trashed
            trashed_at = _text(data.get("trashedAt") or data.get("archivedAt")) or submitted_at or utc_now_iso()
        return cls(
            id=str(data.get("id") or ""),
            parent_name=_text(data.get("parentName")),
            parent_email=_text(data.get("parentEmail")),
            parent_phone=_text(data.get("parentPhone")),
            student_name=_text(data.get("studentName")),
            student_dob=_text(data.get("studentDob")),
            subjects=_subjects(data.get("subjects")),
            relationship=_text(data.get("relationship") or data.get("relationshipToStudent")),
            student_email=_text(data.get("studentEmail")),
            specific_needs=_text(data.get("specificNeeds") or data.get("specificNeedsText")),
            discovery_source=_text(data.get("discoverySource")),
            is_charity=as_bool(data.get("isCharity")) or as_bool(data.get("isChariity")),
            submitted_at=submitted_at,
            is_trashed=trashed,
            trashed_at=trashed_at,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "parentName": self.parent_name,
            "parentEmail": self.parent_email,
            "parentPhone": self.parent_phone,
            "relationship": self.relationship,
            "studentName": self.student_name,
            "studentEmail": self.student_email,
            "studentDob": self.student_dob,
            "subjects": list(self.subjects),
            "specificNeeds": self.specific_needs,
            "discoverySource": self.discovery_source,
            "isCharity": bool(self.is_charity),
            "submittedAt": self.submitted_at,
            "isTrashed": bool(self.is_trashed),
            "trashedAt": self.trashed_at,
        }


@dataclass
class Course:
    id: int
    name: str
    price: float = 0.0
    duration: str = ""
    syllabus: str = ""
    is_free_trial: bool = False
    is_charity: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Course":
        return cls(
            id=int(data.get("id") or 0),
            name=_text(data.get("name")),
            price=float(data.get("price") or 0),
            duration=_text(data.get("duration")),
            syllabus=str(data.get("syllabus") or ""),
            is_free_trial=as_bool(data.get("isFreeTrial")),
            is_charity=as_bool(data.get("isCharity")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "duration": self.duration,
            "syllabus": self.syllabus,
            "isFreeTrial": bool(self.is_free_trial),
            "isCharity": bool(self.is_charity),
        }


DEFAULT_COURSES: tuple[dict, ...] = (
    {"name": "Year 8 - Maths", "price": 15.00, "duration": "1 Hour", "syllabus": "", "isFreeTrial": 1, "isCharity": 0},
    {"name": "Year 9 - Maths", "price": 15.00, "duration": "1 Hour", "syllabus": "", "isFreeTrial": 1, "isCharity": 0},
    {"name": "Year 10 - Maths", "price": 15.00, "duration": "1 Hour", "syllabus": "", "isFreeTrial": 1, "isCharity": 0},
    {"name": "Winner Kingdom (Year 8-11)", "price": 0, "duration": "Sat Only", "syllabus": "", "isFreeTrial": 0, "isCharity": 1},
)

# Fields an admin may overwrite through the bulk course update.
COURSE_FIELDS = ("name", "price", "duration", "syllabus", "isFreeTrial", "isCharity")
