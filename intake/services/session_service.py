"""Session helpers (issue tokens, read them from requests, validation)."""
from __future__ import annotations

import re
import secrets
import threading

from fastapi import Request

_BEARER = re.compile(r"^Bearer$", re.IGNORECASE)


class SessionStore:
    """
    Opaque admin tokens kept in process memory.

    Tokens never expire and are not persisted: a restart logs every admin
    out. One instance lives on ``app.state.session_store``.
    """

    def __init__(self) -> None:
        self._tokens: dict[str, bool] = {}
        self._lock = threading.Lock()

    def issue(self) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._tokens[token] = True
        return token

    def validate(self, token: str | None) -> bool:
        if not token:
            return False
        with self._lock:
            return self._tokens.get(token, False)

    def revoke(self, token: str | None) -> None:
        if not token:
            return
        with self._lock:
            self._tokens.pop(token, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)


def token_from_request(request: Request) -> str | None:
    """Bearer header first, then the ``token`` query parameter."""
    parts = (request.headers.get("authorization") or "").split(" ")
    if len(parts) == 2 and _BEARER.match(parts[0]) and parts[1]:
        return parts[1]
    query_token = (request.query_params.get("token") or "").strip()
    return query_token or None
