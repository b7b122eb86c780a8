"""
Persistence adapters.

Two interchangeable backends implement ``SubmissionRepository``: flat JSON
files and SQL tables. Services depend on the interface only; the backend is
picked from Settings.storage_backend.
"""
from __future__ import annotations

from intake.core.config import Settings, get_settings
from intake.repositories.admin_config import AdminConfig, AdminConfigStore
from intake.repositories.backups import BackupManager
from intake.repositories.base import SubmissionRepository
from intake.repositories.errors import StorageError


def build_repository(settings: Settings | None = None, *, backend: str | None = None) -> SubmissionRepository:
    settings = settings or get_settings()
    backups = BackupManager(settings.backup_dir, retention=settings.backup_retention)
    if (backend or settings.storage_backend) == "sql":
        from intake.repositories.sql_repository import SQLRepository

        return SQLRepository(backups, database_url=settings.database_url)
    from intake.repositories.json_storage import JsonRepository

    return JsonRepository(settings.data_dir, backups, strict=settings.strict_storage)


def build_admin_store(settings: Settings | None = None) -> AdminConfigStore:
    settings = settings or get_settings()
    return AdminConfigStore(
        settings.data_dir / "admin.json",
        default_email=settings.admin_default_email,
        default_password=settings.admin_default_password,
    )


__all__ = [
    "AdminConfig",
    "AdminConfigStore",
    "BackupManager",
    "StorageError",
    "SubmissionRepository",
    "build_admin_store",
    "build_repository",
]
