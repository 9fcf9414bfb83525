"""
Error taxonomy for ingestion and metrics.

Every error carries the HTTP status and the JSON body it is rendered as by the
handlers registered in clinic_insights.main.
"""

from __future__ import annotations

from typing import Any, Optional


class AppError(Exception):
    """Base class for errors rendered as {"success": false, ...} responses."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict[str, Any]:
        return {"success": False, "message": self.message}

    def headers(self) -> Optional[dict[str, str]]:
        return None


class ValidationError(AppError):
    """Missing or invalid field. Not retryable; the caller must fix the payload."""

    status_code = 400


class CoercionError(ValidationError):
    """A numeric field could not be parsed into a finite number."""

    def __init__(self, field: str, value: Any) -> None:
        super().__init__(f"Field {field!r} must be a number, got {value!r}")
        self.field = field

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        body["field"] = self.field
        return body


class InvalidSignatureError(AppError):
    status_code = 401

    def __init__(self, message: str = "Invalid webhook signature") -> None:
        super().__init__(message)


class StoreError(AppError):
    """
    Persistence failure. Carries the backend message; never retried here.

    Transient failures (store unreachable, statement timeout) map to 503 with a
    Retry-After hint so the external caller can back off and retry.
    """

    RETRY_AFTER_SECONDS = 5

    def __init__(self, error: str, transient: bool = False) -> None:
        super().__init__("Database error")
        self.error = error
        self.transient = transient

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return 503 if self.transient else 500

    def to_body(self) -> dict[str, Any]:
        return {"success": False, "message": self.message, "error": self.error}

    def headers(self) -> Optional[dict[str, str]]:
        if self.transient:
            return {"Retry-After": str(self.RETRY_AFTER_SECONDS)}
        return None


class InternalServerError(AppError):
    def __init__(self, error: str) -> None:
        super().__init__("Internal server error")
        self.error = error

    def to_body(self) -> dict[str, Any]:
        return {"success": False, "message": self.message, "error": self.error}
