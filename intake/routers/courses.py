from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from intake.routers.deps import get_course_service, require_admin
from intake.services.errors import ValidationError

router = APIRouter(tags=["courses"])


@router.get("/api/courses")
def public_courses(request: Request):
    return [c.to_dict() for c in get_course_service(request).list()]


@router.get("/admin/api/courses", dependencies=[Depends(require_admin)])
def admin_courses(request: Request):
    return [c.to_dict() for c in get_course_service(request).list()]


@router.post("/admin/api/courses", dependencies=[Depends(require_admin)])
def update_courses(request: Request, payload: Any = Body(None)):
    svc = get_course_service(request)
    entries = payload.get("courses") if isinstance(payload, dict) else payload
    try:
        result = svc.bulk_update(entries)
    except ValidationError as exc:
        raise HTTPException(400, exc.message)
    return {"ok": True, "updated": result.updated, "created": result.created, "skipped": result.skipped}
