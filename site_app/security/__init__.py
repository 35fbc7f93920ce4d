"""
Security Helpers

CSRF tokens, per-IP rate limiting and response hardening shared by the
site's subsystems.
"""

from .csrf import CSRFError, csrf_protected, ensure_csrf_token, set_csrf_cookie, validate_csrf
from .headers import install_security_headers
from .rate_limiter import RateLimiter, RateLimitExceeded, client_ip, rate_limited

__all__ = [
    "CSRFError",
    "csrf_protected",
    "ensure_csrf_token",
    "set_csrf_cookie",
    "validate_csrf",
    "install_security_headers",
    "RateLimiter",
    "RateLimitExceeded",
    "client_ip",
    "rate_limited",
]
