from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from fastapi.responses import Response

from intake.routers.deps import (
    get_export_service,
    get_submission_service,
    require_admin,
)
from intake.services.errors import NotFoundError, ValidationError

router = APIRouter(tags=["submissions"])


@router.post("/submit")
def submit(request: Request, payload: Any = Body(None)):
    svc = get_submission_service(request)
    try:
        svc.submit(payload)
    except ValidationError as exc:
        raise HTTPException(400, exc.message)
    return {"ok": True}


@router.get("/admin/submissions", dependencies=[Depends(require_admin)])
def list_submissions(
    request: Request,
    trashed: Optional[str] = None,
    archived: Optional[str] = None,
    kind: Optional[str] = Query(None, alias="type"),
):
    svc = get_submission_service(request)
    items = svc.list(trashed=trashed if trashed is not None else archived, kind=kind)
    return [item.to_dict() for item in items]


@router.get("/admin/submissions/{submission_id}", dependencies=[Depends(require_admin)])
def get_submission(submission_id: str, request: Request):
    try:
        return get_submission_service(request).get(submission_id).to_dict()
    except NotFoundError as exc:
        raise HTTPException(404, exc.message)


@router.delete("/admin/submissions/{submission_id}", dependencies=[Depends(require_admin)])
def trash_submission(submission_id: str, request: Request):
    try:
        get_submission_service(request).trash(submission_id)
    except NotFoundError as exc:
        raise HTTPException(404, exc.message)
    return {"ok": True, "trashed": True}


@router.post("/admin/submissions/{submission_id}/restore", dependencies=[Depends(require_admin)])
def restore_submission(submission_id: str, request: Request):
    try:
        get_submission_service(request).restore(submission_id)
    except NotFoundError as exc:
        raise HTTPException(404, exc.message)
    return {"ok": True, "restored": True}


@router.delete("/admin/submissions/{submission_id}/permanent", dependencies=[Depends(require_admin)])
def purge_submission(submission_id: str, request: Request):
    try:
        get_submission_service(request).purge(submission_id)
    except NotFoundError as exc:
        raise HTTPException(404, exc.message)
    return {"ok": True, "deleted": True}


@router.get("/admin/export", dependencies=[Depends(require_admin)])
def export_submissions(request: Request):
    csv_text = get_export_service(request).export_csv()
    return Response(
        content=csv_text,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="submissions.csv"'},
    )
