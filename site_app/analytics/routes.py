"""
Analytics Routes

Flask routes and request hooks for page-view and event tracking.
"""

import logging

from flask import Blueprint, jsonify, request

from intake_service.record_store import StoreError

from .services import AnalyticsService, is_trackable_page, page_name

logger = logging.getLogger(__name__)


def create_analytics_blueprint(analytics_service: AnalyticsService) -> Blueprint:
    """Create analytics blueprint with routes.

    Args:
        analytics_service: The analytics service instance

    Returns:
        Flask blueprint with the event endpoint and the page-view hook
    """
    bp = Blueprint('analytics', __name__, url_prefix='/api/analytics')

    @bp.before_app_request
    def track_page_view():
        """Count HTML page views; a tracking failure never fails the page."""
        if not is_trackable_page(request.method, request.path):
            return None
        page = page_name(request.path)
        try:
            analytics_service.track_page_view(page, request.headers.get("Referer"))
        except StoreError as e:
            logger.error(f"Failed to track page view: page={page}, {e.context()}, error={e}")
        return None

    @bp.route("/event", methods=["POST"])
    def track_event():
        """Track a custom client-side event (no admin required)."""
        payload = request.get_json(silent=True) or {}
        event = payload.get("event") if isinstance(payload, dict) else None
        if not event or not isinstance(event, str):
            return jsonify({"success": False, "message": "Event name required"}), 400

        try:
            analytics_service.track_event(event, payload.get("data"))
        except StoreError as e:
            logger.error(f"Error tracking analytics event: event={event[:100]}, {e.context()}, error={e}")
            return jsonify({"success": False, "message": "Server error"}), 500

        return jsonify({"success": True})

    return bp
