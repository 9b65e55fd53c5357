"""
Security utilities for the portfolio API.
Handles: admin token checks, client identity, input sanitization and email masking.
"""
import hmac
from typing import Optional

from fastapi import Request

from portfolio.config import settings
from portfolio.utils.logger import logger


def verify_admin_token(authorization: Optional[str]) -> bool:
    """Checks an ``Authorization: Bearer <token>`` header against ADMIN_API_TOKEN.

    With no ADMIN_API_TOKEN configured every admin request is refused.
    """
    expected = settings.ADMIN_API_TOKEN
    if not expected:
        logger.warning("Admin request refused: ADMIN_API_TOKEN is not configured")
        return False
    if not authorization or not authorization.startswith("Bearer "):
        return False

    provided = authorization[len("Bearer "):].strip()
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def client_ip(request: Request) -> str:
    """Best-effort originating address: X-Forwarded-For, then X-Real-IP, else "unknown"."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    return "unknown"


def mask_email(email: str) -> str:
    """Masks an email for safe logging.
    Example: jane.doe@acme.io → ja****@acme.io
    """
    local, sep, domain = email.partition("@")
    if not sep:
        return "****"
    return local[:2] + "****@" + domain


def sanitize_text(text: str, max_length: Optional[int] = None) -> str:
    """Sanitizes user text input.
    - Removes null bytes
    - Strips leading/trailing whitespace
    - Enforces max length when one is given
    """
    if not text:
        return ""

    # Remove null bytes (Postgres rejects them in text columns)
    text = text.replace("\x00", "")

    text = text.strip()

    if max_length is not None and len(text) > max_length:
        text = text[:max_length]

    return text
