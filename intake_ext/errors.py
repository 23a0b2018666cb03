from __future__ import annotations


class IntakeError(Exception):
    """Base error for everything the boundary layers report back to a caller."""

    code = "internal_failure"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class ValidationError(IntakeError):
    code = "missing_field"


class NotFoundError(IntakeError):
    code = "not_found"


class ConfigurationError(IntakeError):
    code = "not_configured"


class StorageError(IntakeError):
    code = "internal_failure"


class NotificationError(IntakeError):
    code = "notification_failed"
