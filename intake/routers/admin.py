from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from intake.routers.deps import get_auth_service, get_submission_service, require_admin
from intake.services.errors import InvalidCredentialsError, ValidationError

router = APIRouter(prefix="/admin", tags=["admin"])


def _field(payload: Any, name: str):
    return payload.get(name) if isinstance(payload, dict) else None


@router.post("/login")
def login(request: Request, payload: Any = Body(None)):
    auth = get_auth_service(request)
    try:
        result = auth.login(_field(payload, "email"), _field(payload, "password"))
    except InvalidCredentialsError as exc:
        raise HTTPException(401, exc.message)
    return {"ok": True, "token": result.session_token}


@router.post("/change-password")
def change_password(request: Request, payload: Any = Body(None), token: str = Depends(require_admin)):
    auth = get_auth_service(request)
    try:
        auth.change_password(token, _field(payload, "currentPassword"), _field(payload, "newPassword"))
    except ValidationError as exc:
        raise HTTPException(400, exc.message)
    return {"ok": True}


@router.post("/backup", dependencies=[Depends(require_admin)])
def backup(request: Request):
    filename = get_submission_service(request).backup()
    return {"ok": True, "filename": filename}
