"""FastAPI dependencies for authentication and shared helpers."""

import secrets

from fastapi import Header, HTTPException, status

from api.models.responses import ErrorCodes
from core.config import CALSTATS_API_KEY


def error_detail(error: str, code: str, details: list[str] | None = None) -> dict:
    """Body for HTTPException.detail in the standard error format."""
    return {"error": error, "code": code, "details": details or []}


async def verify_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> str:
    """
    Verify API key from X-API-Key header.

    Raises:
        HTTPException: 500 if no key is configured, 401 if key is missing or invalid
    """
    if not CALSTATS_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_detail("API key not configured on server", ErrorCodes.INTERNAL_ERROR),
        )

    # Constant-time comparison
    if not x_api_key or not secrets.compare_digest(x_api_key, CALSTATS_API_KEY):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_detail("Invalid or missing API key", ErrorCodes.UNAUTHORIZED),
        )

    return x_api_key
