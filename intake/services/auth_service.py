"""
Admin authentication use cases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from intake.core.security import hash_password, is_hashed, verify_password
from intake.repositories import AdminConfig, AdminConfigStore, SubmissionRepository
from intake.services.errors import InvalidCredentialsError, ValidationError
from intake.services.session_service import SessionStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


@dataclass
class LoginSuccess:
    email: str
    session_token: str


class AuthService:
    """Handles admin login and password change against the admin side file."""

    def __init__(self, admin_store: AdminConfigStore, sessions: SessionStore, repository: SubmissionRepository) -> None:
        self.admin_store = admin_store
        self.sessions = sessions
        self.repository = repository

    def login(self, email, password) -> LoginSuccess:
        config = self.admin_store.load()
        raw_email = email if isinstance(email, str) else ""
        if raw_email != config.email or not verify_password(password, config.password):
            logger.info("Admin login failed: %s", raw_email or "unknown")
            raise InvalidCredentialsError("Invalid credentials")
        if not is_hashed(config.password):
            self.admin_store.save(AdminConfig(email=config.email, password=hash_password(password)))
        token = self.sessions.issue()
        logger.info("Admin login success: %s", raw_email)
        return LoginSuccess(email=raw_email, session_token=token)

    def change_password(self, token: str, current_password, new_password) -> None:
        config = self.admin_store.load()
        if not verify_password(current_password, config.password):
            raise ValidationError("Current password is incorrect")
        if not isinstance(new_password, str) or not new_password.strip() or len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters")

        self.repository.backup()
        self.admin_store.save(AdminConfig(email=config.email, password=hash_password(new_password)))
        self.sessions.revoke(token)
        logger.info("Admin password changed successfully")
