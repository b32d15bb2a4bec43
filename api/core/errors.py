"""
Error taxonomy shared by services and routers.

Services raise these; `api.app` renders them as `{"success": false, "message": ...}`
with the class status code.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class AuthError(AppError):
    status_code = 401


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class SignatureError(AppError):
    """Webhook payload could not be authenticated."""

    status_code = 400


class StorageError(AppError):
    """Persistence failure. The message is safe to show; the cause is only logged."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
