"""One-off migration script: data/submissions.json -> SQL tables."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Make the intake package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from intake.core.config import get_settings
from intake.domain.records import Submission
from intake.repositories import build_repository


def _load_json(path: Path) -> list:
    if not path.exists():
        raise SystemExit(f"File not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise SystemExit(f"{path} does not hold a JSON array")
    return data


def migrate(source: Path) -> int:
    """Insert every JSON submission whose id is not in the SQL store yet."""
    repo = build_repository(backend="sql")
    migrated = 0
    for row in _load_json(source):
        if not isinstance(row, dict) or not row.get("id"):
            continue
        record = Submission.from_dict(row)
        if repo.get(record.id):
            continue
        repo.add(record)
        migrated += 1
    return migrated


def main() -> None:
    ap = argparse.ArgumentParser(description="Copy JSON submissions into the SQL backend")
    ap.add_argument("--source", help="Path to submissions.json (default: DATA_DIR/submissions.json)")
    args = ap.parse_args()
    source = Path(args.source) if args.source else get_settings().data_dir / "submissions.json"
    count = migrate(source)
    print(f"Migration completed: {count} submission(s) copied.")


if __name__ == "__main__":
    main()
