"""
Utility helpers shared across repositories/services.
"""

from __future__ import annotations

from datetime import datetime, timezone


def as_bool(value) -> bool:
    """
    Coerce stored flags (True/False, 0/1, "true"/"1") into real booleans.
    """
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value) -> float:
    """
    Convert an ISO-8601 string into a sortable POSIX timestamp.

    Missing or unparsable values sort as the earliest possible instant.
    """
    raw = (value or "").strip() if isinstance(value, str) else ""
    if not raw:
        return float("-inf")
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return float("-inf")
    # Naive values were written as UTC by older records.
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def has_text(value) -> bool:
    return isinstance(value, str) and value.strip() != ""
