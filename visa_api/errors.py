"""
errors.py — Domain exceptions and the standard error envelope.

Every error response body has the shape:
    {"error": {"code": str, "message": str, "details": [...]}}
"""
from typing import Any

from fastapi.responses import JSONResponse


class NotFoundError(Exception):
    """
    A nationality, country, entry profile or sub-resource could not be resolved.

    kind is the human label ("Nationality", "Destination country", ...) and
    token is whatever the caller asked for, so the message says what was missing.
    """

    def __init__(self, kind: str, token: Any) -> None:
        self.kind = kind
        self.token = token
        super().__init__(f"{kind} not found: {token}")


def make_error_response(
    code: str,
    message: str,
    details: list[dict[str, Any]] | None = None,
    status_code: int = 500,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a standard {error: {code, message, details}} response."""
    body = {
        "error": {
            "code": code,
            "message": message,
            "details": details or [],
        }
    }
    return JSONResponse(status_code=status_code, content=body, headers=headers)
