"""Custom exception hierarchy for the ledger API."""

from __future__ import annotations

from enum import Enum
from typing import Any


class AppError(Exception):
    """Base application error with a stable machine-readable code."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error in the API standard shape."""
        return {"error": self.message, "code": self.code}


class AuthFailure(str, Enum):
    """Reasons a caller could not be authenticated."""

    MISSING_TOKEN = "MISSING_TOKEN"
    MALFORMED_TOKEN = "MALFORMED_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    STALE_TOKEN = "STALE_TOKEN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"


_AUTH_MESSAGES = {
    AuthFailure.MISSING_TOKEN: "Access token required",
    AuthFailure.MALFORMED_TOKEN: "Invalid token",
    AuthFailure.TOKEN_EXPIRED: "Token expired",
    AuthFailure.STALE_TOKEN: "Invalid token - session is no longer active",
    AuthFailure.INVALID_CREDENTIALS: "Invalid email or password",
}


class AuthenticationError(AppError):
    """Raised when the caller is not authenticated."""

    def __init__(self, reason: AuthFailure) -> None:
        self.reason = reason
        super().__init__(message=_AUTH_MESSAGES[reason], code=reason.value, status_code=401)


class ValidationError(AppError):
    """Raised when request fields fail validation."""

    def __init__(self, details: list[dict[str, str]]) -> None:
        self.details = details
        super().__init__(message="Validation failed", code="VALIDATION_FAILED", status_code=400)

    @classmethod
    def single(cls, field: str, message: str) -> ValidationError:
        """Build an error carrying one field-level message."""
        return cls([{"field": field, "message": message}])

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["details"] = self.details
        return payload


class NotFoundError(AppError):
    """Raised when a requested resource does not exist."""

    def __init__(self, resource: str) -> None:
        super().__init__(message=f"{resource} not found", code="NOT_FOUND", status_code=404)


class ConflictError(AppError):
    """Raised on duplicate/conflicting operations."""

    def __init__(self, reason: str, code: str = "CONFLICT", status_code: int = 409) -> None:
        super().__init__(message=reason, code=code, status_code=status_code)


class EmailTakenError(ConflictError):
    """Raised when registering an email that already has an account."""

    def __init__(self) -> None:
        super().__init__("Email is already taken", code="EMAIL_TAKEN", status_code=400)


class StoreError(AppError):
    """Raised when the durable store fails or times out.

    ``detail`` keeps the underlying driver message; it is only exposed to
    clients outside production.
    """

    def __init__(
        self,
        detail: str,
        code: str = "STORE_ERROR",
        message: str = "Internal server error",
    ) -> None:
        self.detail = detail
        super().__init__(message=message, code=code, status_code=500)


class StoreUnavailableError(StoreError):
    """Raised when no pooled connection could be acquired in time."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail, code="STORE_UNAVAILABLE", message="Service temporarily unavailable")
