"""
Admin key authentication.
"""

import logging
import secrets
from functools import wraps
from typing import Callable, Optional, Tuple

from flask import Response, jsonify, request

logger = logging.getLogger(__name__)

ADMIN_KEY_HEADER = "X-Admin-Key"


class AdminGuard:
    """Checks the ``X-Admin-Key`` header against the configured key.

    Without a configured key the API is open in development (with a warning)
    and refuses every request in production.
    """

    def __init__(self, admin_key: str, is_production: bool):
        self.admin_key = admin_key or ""
        self.is_production = is_production

    def check(self) -> Optional[Tuple[Response, int]]:
        """Return an error response, or None when access is granted."""
        if not self.admin_key:
            if self.is_production:
                logger.error("ADMIN_KEY not set in production!")
                return jsonify({"success": False, "message": "Server configuration error"}), 500
            logger.warning("ADMIN_KEY not set - admin endpoints unprotected (dev mode)")
            return None

        supplied = request.headers.get(ADMIN_KEY_HEADER, "")
        if not secrets.compare_digest(supplied.encode(), self.admin_key.encode()):
            logger.warning(f"Unauthorized admin access attempt: ip={request.remote_addr}")
            return jsonify({"success": False, "message": "Unauthorized"}), 401

        logger.info(f"Admin access granted: method={request.method}, path={request.path}, ip={request.remote_addr}")
        return None

    def required(self, f: Callable) -> Callable:
        """Decorator to require admin access."""
        @wraps(f)
        def decorated_function(*args, **kwargs):
            error = self.check()
            if error:
                return error
            return f(*args, **kwargs)
        return decorated_function
