"""
Double-submit CSRF protection.

``GET /api/csrf-token`` hands the browser a random token, both in the JSON
body and in a cookie. State-changing form endpoints then require the same
token back in the ``X-CSRF-Token`` header (or a ``_csrf`` form/JSON field).
"""

import logging
import secrets
from functools import wraps
from typing import Callable, Optional

from flask import Response, request
from werkzeug.exceptions import Forbidden

logger = logging.getLogger(__name__)

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "X-CSRF-Token"
CSRF_FIELD_NAME = "_csrf"
CSRF_FAILURE_MESSAGE = "Invalid security token. Please refresh the page and try again."


class CSRFError(Forbidden):
    """Missing or mismatched CSRF token."""

    description = CSRF_FAILURE_MESSAGE


def _new_token() -> str:
    return secrets.token_urlsafe(32)


def ensure_csrf_token() -> str:
    """Reuse the cookie token when it looks sane, otherwise mint a new one."""
    token = request.cookies.get(CSRF_COOKIE_NAME)
    if not token or len(token) < 16:
        token = _new_token()
    return token


def set_csrf_cookie(response: Response, token: str, secure: bool) -> None:
    response.set_cookie(
        CSRF_COOKIE_NAME,
        token,
        max_age=7 * 24 * 60 * 60,
        httponly=True,
        secure=secure,
        samesite="Strict",
        path="/",
    )


def _supplied_token() -> str:
    header_token = request.headers.get(CSRF_HEADER_NAME)
    if header_token:
        return header_token.strip()
    if request.form.get(CSRF_FIELD_NAME):
        return request.form[CSRF_FIELD_NAME].strip()
    payload = request.get_json(silent=True)
    if isinstance(payload, dict) and isinstance(payload.get(CSRF_FIELD_NAME), str):
        return payload[CSRF_FIELD_NAME].strip()
    return ""


def validate_csrf() -> None:
    """Raise CSRFError unless the request carries the cookie's token."""
    cookie_token: Optional[str] = request.cookies.get(CSRF_COOKIE_NAME)
    token = _supplied_token()
    if not cookie_token or not token or not secrets.compare_digest(cookie_token.encode(), token.encode()):
        logger.warning(f"Invalid CSRF token: ip={request.remote_addr}, path={request.path}")
        raise CSRFError()


def csrf_protected(f: Callable) -> Callable:
    """Decorator that validates the CSRF token before running the view."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        validate_csrf()
        return f(*args, **kwargs)
    return decorated_function
