"""Timestamped snapshot files with a bounded retention."""
from __future__ import annotations

import json
import logging
import shutil
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable

from intake.repositories.errors import StorageError

logger = logging.getLogger(__name__)

PREFIX = "submissions-"
SUFFIX = ".json"


class BackupManager:
    """
    Writes ``submissions-YYYY-MM-DD-HH-MM-SS.json`` snapshots and prunes the
    oldest ones beyond ``retention``.

    Snapshots taken within the same second get a ``_01``, ``_02``... suffix,
    which keeps the lexical order of the file names chronological. Picking a
    name, writing it and pruning happen under one lock, so callers on several
    threads never share a target file.
    """

    def __init__(self, directory: Path, retention: int = 30, clock: Callable[[], datetime] = datetime.now) -> None:
        self.directory = Path(directory)
        self.retention = max(1, int(retention))
        self._clock = clock
        self._lock = threading.Lock()

    def _target(self) -> Path:
        stamp = self._clock().strftime("%Y-%m-%d-%H-%M-%S")
        target = self.directory / f"{PREFIX}{stamp}{SUFFIX}"
        n = 0
        while target.exists():
            n += 1
            target = self.directory / f"{PREFIX}{stamp}_{n:02d}{SUFFIX}"
        return target

    def list_backups(self) -> list[Path]:
        if not self.directory.exists():
            return []
        return sorted(
            p for p in self.directory.iterdir() if p.name.startswith(PREFIX) and p.name.endswith(SUFFIX)
        )

    def prune(self) -> list[str]:
        with self._lock:
            return self._prune()

    def _prune(self) -> list[str]:
        files = self.list_backups()
        excess = len(files) - self.retention
        removed = []
        for path in files[: max(0, excess)]:
            # another process sharing the directory may have pruned it already
            path.unlink(missing_ok=True)
            removed.append(path.name)
        if removed:
            logger.info("Pruned %d old backup(s)", len(removed))
        return removed

    def snapshot_file(self, source: Path) -> str:
        """Copy ``source`` (or an empty array when it does not exist yet)."""
        with self._lock:
            try:
                self.directory.mkdir(parents=True, exist_ok=True)
                target = self._target()
                if Path(source).exists():
                    shutil.copyfile(source, target)
                else:
                    target.write_text("[]", encoding="utf-8")
                self._prune()
            except OSError as exc:
                raise StorageError(f"Backup failed: {exc}") from exc
        logger.info("Backup written: %s", target.name)
        return target.name

    def snapshot_records(self, records: Iterable[dict]) -> str:
        payload = list(records)
        with self._lock:
            try:
                self.directory.mkdir(parents=True, exist_ok=True)
                target = self._target()
                target.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
                self._prune()
            except (OSError, TypeError, ValueError) as exc:
                raise StorageError(f"Backup failed: {exc}") from exc
        logger.info("Backup written: %s", target.name)
        return target.name
