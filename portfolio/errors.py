"""
Error types surfaced to API clients.

Every APIError is rendered as {"error": message} (plus "code" when set) by the
handler registered in portfolio.main. Messages are safe for clients; upstream
provider text never goes in here.
"""
from typing import Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse


class APIError(Exception):
    status_code: int = 500
    default_message: str = "Something went wrong. Please try again."

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.code = code
        self.headers = headers
        super().__init__(self.message)


class ValidationFailed(APIError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(APIError):
    status_code = 401
    default_message = "Unauthorized"


class NotFound(APIError):
    status_code = 404
    default_message = "Not found"


class RateLimited(APIError):
    status_code = 429
    default_message = "Too many requests. Please wait a moment before trying again."

    def __init__(self, retry_after: int, message: Optional[str] = None) -> None:
        super().__init__(message, headers={"Retry-After": str(retry_after)})
        self.retry_after = retry_after


class UpstreamConfigError(APIError):
    """The completion provider rejected our credentials (or none are set)."""
    status_code = 500
    default_message = "Chat service is not configured. Please contact the site owner."


class UpstreamTransientError(APIError):
    status_code = 500
    default_message = "Something went wrong. Please try again."


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    body = {"error": exc.message}
    if exc.code:
        body["code"] = exc.code
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


__all__ = [
    "APIError",
    "ValidationFailed",
    "Unauthorized",
    "NotFound",
    "RateLimited",
    "UpstreamConfigError",
    "UpstreamTransientError",
    "api_error_handler",
]
