from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from intake.core.config import Settings, get_settings
from intake.core.logging_setup import configure_logging
from intake.domain.records import DEFAULT_COURSES
from intake.repositories import StorageError, build_admin_store, build_repository
from intake.routers import admin as admin_router
from intake.routers import courses as courses_router
from intake.routers import submissions as submissions_router
from intake.services.auth_service import AuthService
from intake.services.course_service import CourseService
from intake.services.export_service import ExportService
from intake.services.session_service import SessionStore
from intake.services.submission_service import SubmissionService

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, nosniff, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=headers)


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def body_error(request: Request, exc: RequestValidationError):
        return _error(400, "Invalid request payload")

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError):
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        return _error(500, str(exc) or "Storage error")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API with its repository, services and session store wired on app.state."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="AceLab Intake API")

    repository = build_repository(settings)
    repository.seed_courses(DEFAULT_COURSES)
    sessions = SessionStore()

    app.state.settings = settings
    app.state.repository = repository
    app.state.session_store = sessions
    app.state.submission_service = SubmissionService(repository)
    app.state.course_service = CourseService(repository, allow_create=settings.course_bulk_create)
    app.state.auth_service = AuthService(build_admin_store(settings), sessions, repository)
    app.state.export_service = ExportService(repository, subject_separator=settings.export_subject_separator)

    allow_all = "*" in settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else sorted(settings.cors_origins),
        allow_credentials=not allow_all,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    _install_error_handlers(app)

    app.include_router(submissions_router.router)
    app.include_router(admin_router.router)
    app.include_router(courses_router.router)

    @app.get("/health")
    def health():
        return {"ok": True, "storage": repository.name}

    logger.info("Intake API ready (storage=%s, data_dir=%s)", repository.name, settings.data_dir)
    return app
