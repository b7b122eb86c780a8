"""
Configuration helpers for the intake backend.

Routers/services read a Settings instance instead of fetching os.environ
directly, so tests can swap the environment and call
``get_settings.cache_clear()``.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_ADMIN_EMAIL = "admin@acelab.com"
DEFAULT_ADMIN_PASSWORD = "admin123"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_dir: Path
    storage_backend: str
    database_url: str
    backup_retention: int
    strict_storage: bool
    course_bulk_create: bool
    export_subject_separator: str
    admin_default_email: str
    admin_default_password: str
    cors_origins: tuple[str, ...]
    log_level: str

    @property
    def backup_dir(self) -> Path:
        return self.data_dir / "backups"


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    data_dir = Path(os.getenv("DATA_DIR") or "data").resolve()
    backend = (os.getenv("STORAGE_BACKEND") or "json").strip().lower()
    database_url = (os.getenv("DATABASE_URL") or "").strip() or f"sqlite:///{data_dir / 'acelab.db'}"
    origins = tuple(o.strip() for o in (os.getenv("CORS_ORIGINS") or "*").split(",") if o.strip())

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_dir=data_dir,
        storage_backend=backend if backend in {"json", "sql"} else "json",
        database_url=database_url,
        backup_retention=max(1, _int(os.getenv("BACKUP_RETENTION", "30"), 30)),
        strict_storage=_bool(os.getenv("STRICT_STORAGE"), False),
        course_bulk_create=_bool(os.getenv("COURSE_BULK_CREATE"), False),
        export_subject_separator=os.getenv("EXPORT_SUBJECT_SEPARATOR", ", ") or ", ",
        admin_default_email=os.getenv("ADMIN_DEFAULT_EMAIL", DEFAULT_ADMIN_EMAIL),
        admin_default_password=os.getenv("ADMIN_DEFAULT_PASSWORD", DEFAULT_ADMIN_PASSWORD),
        cors_origins=origins,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
