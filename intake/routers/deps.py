"""Request-scoped lookups shared by the routers."""
from __future__ import annotations

from fastapi import HTTPException, Request

from intake.services.auth_service import AuthService
from intake.services.course_service import CourseService
from intake.services.export_service import ExportService
from intake.services.session_service import SessionStore, token_from_request
from intake.services.submission_service import SubmissionService


def _state(request: Request, name: str):
    svc = getattr(getattr(request.app, "state", None), name, None)
    if svc is None:
        raise RuntimeError(f"{name} is not configured")
    return svc


def get_submission_service(request: Request) -> SubmissionService:
    return _state(request, "submission_service")


def get_course_service(request: Request) -> CourseService:
    return _state(request, "course_service")


def get_auth_service(request: Request) -> AuthService:
    return _state(request, "auth_service")


def get_export_service(request: Request) -> ExportService:
    return _state(request, "export_service")


def get_session_store(request: Request) -> SessionStore:
    return _state(request, "session_store")


def require_admin(request: Request) -> str:
    """Return the presenting admin token or fail with 401."""
    token = token_from_request(request)
    if not token or not get_session_store(request).validate(token):
        raise HTTPException(401, "Unauthorized")
    return token
