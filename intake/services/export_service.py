"""CSV rendering of the submission store."""

from __future__ import annotations

import csv
import io
from typing import Iterable

from intake.domain.records import Submission
from intake.repositories import SubmissionRepository

HEADERS = (
    "Date",
    "Parent Name",
    "Parent Email",
    "Parent Phone",
    "Relationship",
    "Student Name",
    "Student Email",
    "Student DOB",
    "Subjects",
    "Discovery Source",
    "Specific Needs",
    "Type",
    "Status",
)


def render_csv(submissions: Iterable[Submission], subject_separator: str = ", ") -> str:
    """
    One header row plus one row per submission. Fields holding a comma, a
    quote or a line break are quoted with inner quotes doubled.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(HEADERS)
    for s in submissions:
        writer.writerow(
            [
                s.submitted_at,
                s.parent_name,
                s.parent_email,
                s.parent_phone,
                s.relationship,
                s.student_name,
                s.student_email,
                s.student_dob,
                subject_separator.join(s.subjects),
                s.discovery_source,
                s.specific_needs,
                "Charity" if s.is_charity else "Standard",
                "Trashed" if s.is_trashed else "Active",
            ]
        )
    return buf.getvalue()


class ExportService:
    def __init__(self, repository: SubmissionRepository, *, subject_separator: str = ", ") -> None:
        self.repository = repository
        self.subject_separator = subject_separator

    def export_csv(self) -> str:
        return render_csv(self.repository.load(), self.subject_separator)
