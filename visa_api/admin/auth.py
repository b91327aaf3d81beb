"""
auth.py — Shared-secret guard for the admin surface.

Registered as an HTTP middleware so that a missing or wrong x-api-key is
answered with 401 before routing, body parsing or payload validation.
"""
import logging
import secrets

from fastapi import Request

from visa_api.config import settings
from visa_api.errors import make_error_response

logger = logging.getLogger(__name__)

ADMIN_PREFIX = "/v1/admin"
API_KEY_HEADER = "x-api-key"


def is_admin_path(path: str) -> bool:
    return path == ADMIN_PREFIX or path.startswith(ADMIN_PREFIX + "/")


def has_valid_key(request: Request) -> bool:
    supplied = request.headers.get(API_KEY_HEADER)
    if not supplied:
        return False
    return secrets.compare_digest(supplied.encode("utf-8"), settings.admin_api_key.encode("utf-8"))


async def admin_key_middleware(request: Request, call_next):
    # CORS preflight carries no custom headers
    if request.method != "OPTIONS" and is_admin_path(request.url.path):
        if not has_valid_key(request):
            logger.warning("Rejected admin request %s %s", request.method, request.url.path)
            return make_error_response(
                code="UNAUTHORIZED",
                message="Missing or invalid API key",
                status_code=401,
            )
    return await call_next(request)
