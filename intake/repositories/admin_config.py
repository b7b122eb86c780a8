"""Admin credential side file (``admin.json``) shared by both backends."""
from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from pathlib import Path

from intake.repositories.errors import StorageError


@dataclass
class AdminConfig:
    email: str
    password: str


class AdminConfigStore:
    """Singleton admin record, created with defaults on first access."""

    def __init__(self, path: Path, default_email: str, default_password: str) -> None:
        self.path = Path(path)
        self._defaults = AdminConfig(email=default_email, password=default_password)
        self._lock = threading.Lock()

    def _ensure_file(self) -> None:
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write(self._defaults)

    def _write(self, config: AdminConfig) -> None:
        payload = {
            "email": config.email or self._defaults.email,
            "password": config.password or self._defaults.password,
        }
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def load(self) -> AdminConfig:
        with self._lock:
            try:
                self._ensure_file()
                with self.path.open("r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as exc:
                raise StorageError("Admin config unavailable") from exc
            if not isinstance(data, dict):
                raise StorageError("Admin config unavailable")
            return AdminConfig(
                email=data.get("email") or self._defaults.email,
                password=data.get("password") or self._defaults.password,
            )

    def save(self, config: AdminConfig) -> None:
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._write(config)
            except OSError as exc:
                raise StorageError(f"Could not save admin config: {exc}") from exc
