#!/usr/bin/env python3
"""
Reset the admin credentials stored in DATA_DIR/admin.json.

Usage:
  python scripts/reset_admin.py [--email admin@acelab.com] [--password ...]
"""
from __future__ import annotations

import argparse
import secrets
import string
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from intake.core.security import hash_password
from intake.repositories import AdminConfig, build_admin_store
from intake.services.auth_service import MIN_PASSWORD_LENGTH


def gen_password(length: int = 12) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def main() -> None:
    ap = argparse.ArgumentParser(description="Reset admin credentials")
    ap.add_argument("--email", help="New admin e-mail (default: keep current)")
    ap.add_argument("--password", help="New password (default: random 12 characters)")
    args = ap.parse_args()

    store = build_admin_store()
    current = store.load()
    email = (args.email or "").strip() or current.email
    password = args.password or gen_password()
    if len(password) < MIN_PASSWORD_LENGTH:
        raise SystemExit(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    store.save(AdminConfig(email=email, password=hash_password(password)))

    print("OK: admin reset")
    print(f"  E-mail: {email}")
    print(f"  Password: {password}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
