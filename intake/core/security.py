"""Security helpers (hashing and verification)."""

from __future__ import annotations

import secrets

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
_PREFIX = "argon2$"


def hash_password(password: str) -> str:
    """Create a modern Argon2 hash with a prefix for detection."""
    hashed = _ph.hash(password)
    return f"{_PREFIX}{hashed}"


def is_hashed(stored: str | None) -> bool:
    return (stored or "").startswith(_PREFIX)


def verify_password(password: str | None, stored: str | None) -> bool:
    """
    Check a candidate against a stored credential.

    Legacy admin files keep the password in plaintext; those are compared in
    constant time until the next login upgrades them to an Argon2 hash.
    """
    candidate = password if isinstance(password, str) else ""
    stored = stored or ""
    if not candidate or not stored:
        return False
    if stored.startswith(_PREFIX):
        hashed = stored[len(_PREFIX) :]
        try:
            return _ph.verify(hashed, candidate)
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False
    return secrets.compare_digest(candidate.encode("utf-8"), stored.encode("utf-8"))
