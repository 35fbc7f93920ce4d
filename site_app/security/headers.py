"""
Response hardening: security headers and HTTPS redirect.
"""

from typing import Optional

from flask import Flask, Response, redirect, request

CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com; "
    "font-src 'self' https://fonts.gstatic.com; "
    "script-src 'self'; "
    "img-src 'self' data: https:; "
    "connect-src 'self'"
)


def install_security_headers(app: Flask, enforce_https: bool) -> None:
    """Register hooks that add baseline headers and, in production, force HTTPS."""

    @app.before_request
    def redirect_to_https() -> Optional[Response]:
        if enforce_https and request.scheme != "https":
            return redirect(request.url.replace("http://", "https://", 1), code=301)
        return None

    @app.after_request
    def add_security_headers(response: Response) -> Response:
        response.headers.setdefault("Content-Security-Policy", CONTENT_SECURITY_POLICY)
        response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
        if enforce_https:
            response.headers.setdefault("Strict-Transport-Security", "max-age=15552000; includeSubDomains")
        return response
