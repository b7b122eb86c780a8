"""Exceptions raised by the use-case services; routers map them to HTTP codes."""


class IntakeError(Exception):
    """Base class for service-level failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(IntakeError):
    pass


class NotFoundError(IntakeError):
    pass


class InvalidCredentialsError(IntakeError):
    pass
