"""Utility script to create the database schema and seed the course catalog."""
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata


def create_all() -> None:
    engine = get_engine()
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    from intake.domain.records import DEFAULT_COURSES
    from intake.repositories import build_repository

    try:
        create_all()
        seeded = build_repository(backend="sql").seed_courses(DEFAULT_COURSES)
        print(f"Database tables created successfully ({seeded} course(s) seeded).")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
