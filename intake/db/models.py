"""SQLAlchemy models mirroring the JSON submission/course records."""
from __future__ import annotations

from sqlalchemy import Column, Float, Integer, String, Text, JSON
from sqlalchemy.types import TypeDecorator

from .session import Base


class IntFlag(TypeDecorator):
    """Boolean stored as 0/1 INTEGER; the only place flags cross the SQL boundary."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return 0
        return 1 if value else 0

    def process_result_value(self, value, dialect):
        return bool(value)


class SubmissionRow(Base):
    __tablename__ = "submissions"

    id = Column(String(64), primary_key=True)
    parent_name = Column(Text, nullable=False, default="")
    parent_email = Column(Text, nullable=False, default="")
    parent_phone = Column(Text, nullable=False, default="")
    student_name = Column(Text, nullable=False, default="")
    student_email = Column(Text, nullable=False, default="")
    student_dob = Column(String(32), nullable=False, default="")
    relationship = Column(Text, nullable=False, default="")
    specific_needs = Column(Text, nullable=False, default="")
    subjects = Column(JSON, nullable=False, default=list)
    discovery_source = Column(Text, nullable=False, default="")
    is_charity = Column(IntFlag, nullable=False, default=False)
    submitted_at = Column(String(64), nullable=False, default="")
    is_trashed = Column(IntFlag, nullable=False, default=False)
    trashed_at = Column(String(64), nullable=True)
    # Insertion order, so load() matches the JSON backend's storage order.
    seq = Column(Integer, nullable=False, default=0, index=True)


class CourseRow(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, default="")
    price = Column(Float, nullable=False, default=0.0)
    duration = Column(Text, nullable=False, default="")
    syllabus = Column(Text, nullable=False, default="")
    is_free_trial = Column(IntFlag, nullable=False, default=False)
    is_charity = Column(IntFlag, nullable=False, default=False)
