"""Exception taxonomy of the document service and the JSON error envelope."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any


class DocumentError(Exception):
    """Base error carrying an HTTP-style status code."""

    status_code = 500

    def __init__(self, message: str, details: Any = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code


class BadInputError(DocumentError):
    """Malformed request (e.g. non-positive deal id)."""

    status_code = 400


class NotFoundError(DocumentError):
    """Referenced deal does not exist."""

    status_code = 404


class ForbiddenError(DocumentError):
    """Reservation approval gate denied."""

    status_code = 403


class GenerationError(DocumentError):
    """Composition or rendering failed; message is bounded, cause is logged."""

    status_code = 500


def error_envelope(message: str, details: Any = None) -> dict[str, Any]:
    """`{"error": {"message", "details"?}, "timestamp"}`."""
    error: dict[str, Any] = {"message": message}
    if details is not None:
        error["details"] = details
    return {
        "error": error,
        "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
    }
