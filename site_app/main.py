import argparse
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from flask import Flask, abort, jsonify, make_response, request, send_from_directory
from werkzeug.exceptions import NotFound, RequestEntityTooLarge
from werkzeug.middleware.proxy_fix import ProxyFix

from config_manager import ConfigManager
from intake_service.logging_config import setup_logging
from intake_service.record_store import JsonFileRecordStore, RecordStore, RetryPolicy
from site_app.admin import create_admin_module
from site_app.analytics import create_analytics_module
from site_app.security import (
    CSRFError,
    RateLimiter,
    RateLimitExceeded,
    client_ip,
    ensure_csrf_token,
    install_security_headers,
    set_csrf_cookie,
)
from site_app.security.rate_limiter import FORM_LIMIT_MESSAGE, GENERAL_LIMIT_MESSAGE
from site_app.submissions import create_submissions_module

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent

# Never served from the static directory, even if they live inside it
_PRIVATE_PREFIXES = ("data/", ".")


def _resolve(path_str: str) -> Path:
    path = Path(path_str)
    return path if path.is_absolute() else PROJECT_ROOT / path


def create_app(
    config_manager: Optional[ConfigManager] = None,
    store: Optional[RecordStore] = None,
    configure_logging: bool = True,
) -> Flask:
    """Build the Flask application.

    Args:
        config_manager: Configuration source (defaults to site_config.json + env)
        store: Record store to use instead of the file-backed one
        configure_logging: Install the queue-based root logging handlers

    Returns:
        Configured Flask app; subsystem modules live in app.extensions["site"]
    """
    config_manager = config_manager or ConfigManager()
    app_config = config_manager.get_app_config()
    paths_config = config_manager.get_paths_config()
    store_config = config_manager.get_store_config()
    security_config = config_manager.get_security_config()
    analytics_config = config_manager.get_analytics_config()

    if configure_logging:
        setup_logging(app_config.log_level, debug=app_config.debug)

    app = Flask(__name__, static_folder=None)
    # Forwarded headers are client-controlled unless a proxy sits in front
    if app_config.is_production:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)
    app.config["MAX_CONTENT_LENGTH"] = security_config.max_body_bytes

    started_at = time.monotonic()
    static_dir = _resolve(paths_config.static_dir)

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    if store is None:
        store = JsonFileRecordStore(
            _resolve(paths_config.data_dir),
            RetryPolicy(
                retries=store_config.lock_retries,
                min_timeout=store_config.lock_min_timeout,
                max_timeout=store_config.lock_max_timeout,
                wait_timeout=store_config.lock_wait_timeout,
            ),
        )
    store.initialize()

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    general_limiter = RateLimiter(
        security_config.general_rate_limit, security_config.rate_window_seconds, GENERAL_LIMIT_MESSAGE
    )
    form_limiter = RateLimiter(
        security_config.form_rate_limit, security_config.rate_window_seconds, FORM_LIMIT_MESSAGE
    )

    install_security_headers(app, enforce_https=app_config.is_production)

    @app.before_request
    def apply_general_rate_limit():
        general_limiter.check(f"general:{client_ip()}")

    # -------------------------------------------------------------------------
    # Subsystems
    # -------------------------------------------------------------------------

    analytics_module = create_analytics_module(
        store=store,
        site_host=app_config.site_host,
        config=analytics_config
    )
    submissions_module = create_submissions_module(store=store, form_limiter=form_limiter)
    admin_module = create_admin_module(
        store=store,
        analytics_service=analytics_module["service"],
        admin_key=app_config.admin_key,
        is_production=app_config.is_production
    )

    app.register_blueprint(analytics_module["blueprint"])
    app.register_blueprint(submissions_module["blueprint"])
    app.register_blueprint(admin_module["blueprint"])

    app.extensions["site"] = {
        "store": store,
        "analytics": analytics_module,
        "submissions": submissions_module,
        "admin": admin_module,
        "limiters": {"general": general_limiter, "forms": form_limiter},
    }

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

    @app.get("/health")
    def health():
        """Health check endpoint for monitoring tools and load balancers."""
        return jsonify({
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "uptime": round(time.monotonic() - started_at, 3)
        })

    @app.get("/api/csrf-token")
    def csrf_token():
        """Issue a CSRF token for the public forms."""
        token = ensure_csrf_token()
        response = make_response(jsonify({"csrfToken": token}))
        set_csrf_cookie(response, token, secure=app_config.is_production)
        return response

    @app.get("/")
    def index():
        return _send_static("index.html")

    @app.get("/<path:filename>")
    def static_files(filename):
        """Serve the marketing pages and their assets."""
        return _send_static(filename)

    def _send_static(filename: str):
        if filename.startswith(_PRIVATE_PREFIXES) or "/." in filename:
            abort(404)
        if not Path(filename).suffix and (static_dir / f"{filename}.html").is_file():
            filename = f"{filename}.html"
        return send_from_directory(static_dir, filename)

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        return jsonify({"success": False, "message": e.description}), 403

    @app.errorhandler(RateLimitExceeded)
    def handle_rate_limit(e):
        response = jsonify({"success": False, "message": e.description})
        response.headers["Retry-After"] = str(e.retry_after)
        return response, 429

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e):
        return jsonify({"success": False, "message": "Request body too large"}), 413

    @app.errorhandler(NotFound)
    def handle_not_found(e):
        if request.path.startswith("/api/") or not (static_dir / "404.html").is_file():
            return jsonify({"success": False, "message": "Not found"}), 404
        return send_from_directory(static_dir, "404.html"), 404

    @app.errorhandler(500)
    def handle_server_error(e):
        original = getattr(e, "original_exception", None) or e
        logger.error(f"Unhandled error: path={request.path}, error={original!r}", exc_info=original)
        if request.path.startswith("/api/") or not (static_dir / "500.html").is_file():
            return jsonify({"success": False, "message": "Server error"}), 500
        return send_from_directory(static_dir, "500.html"), 500

    logger.info(
        f"Site server configured: environment={app_config.environment}, "
        f"data_dir={paths_config.data_dir}, static_dir={static_dir}"
    )
    return app


# -----------------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    # Parse command line arguments
    parser = argparse.ArgumentParser(description="Tsono site backend")
    parser.add_argument("--port", type=int, help="Port to run the server on")
    parser.add_argument("--host", type=str, help="Host to bind the server to")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    parser.add_argument("--config", type=str, default="site_config.json", help="Path to the JSON config file")
    args = parser.parse_args()

    manager = ConfigManager(args.config)
    app_config = manager.get_app_config()

    # Override configuration with command line arguments
    if args.port:
        app_config.port = args.port
    if args.host:
        app_config.host = args.host
    if args.debug:
        app_config.debug = args.debug

    app = create_app(manager)
    logger.info(
        f"Tsono server started: port={app_config.port}, mode={app_config.environment}, "
        f"security=headers,rate-limiting,csrf"
    )
    app.run(
        host=app_config.host,
        port=app_config.port,
        debug=app_config.debug,
        threaded=True
    )
