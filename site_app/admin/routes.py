"""
Admin Routes

Flask routes for the protected admin API: submission listings, combined
view, CSV export and the analytics report.
"""

import logging

from flask import Blueprint, Response, jsonify

from intake_service.record_store import CONTACTS, INVESTORS, LEADS, StoreError
from site_app.analytics.services import AnalyticsService

from .auth import AdminGuard
from .services import EXPORTABLE, AdminService

logger = logging.getLogger(__name__)


def _store_failure(e: StoreError):
    logger.error(f"Admin read failed: {e.context()}, error={e}")
    return jsonify({"success": False, "message": "Server error. Please try again."}), 500


def create_admin_blueprint(
    admin_service: AdminService,
    analytics_service: AnalyticsService,
    admin_guard: AdminGuard
) -> Blueprint:
    """Create admin blueprint with routes.

    Args:
        admin_service: The admin service instance
        analytics_service: Service producing the analytics report
        admin_guard: Admin key checker

    Returns:
        Flask blueprint with admin routes
    """
    bp = Blueprint('admin', __name__, url_prefix='/api')

    def _listing(collection: str):
        try:
            records = admin_service.list_records(collection)
        except StoreError as e:
            return _store_failure(e)
        return jsonify({"success": True, "count": len(records), "data": records})

    @bp.route("/leads", methods=["GET"])
    @admin_guard.required
    def list_leads():
        """Get all leads."""
        return _listing(LEADS)

    @bp.route("/contacts", methods=["GET"])
    @admin_guard.required
    def list_contacts():
        """Get all contact messages."""
        return _listing(CONTACTS)

    @bp.route("/investors", methods=["GET"])
    @admin_guard.required
    def list_investors():
        """Get all investor inquiries."""
        return _listing(INVESTORS)

    @bp.route("/all", methods=["GET"])
    @admin_guard.required
    def list_all():
        """Get all submissions combined."""
        try:
            combined = admin_service.get_all()
        except StoreError as e:
            return _store_failure(e)
        return jsonify({"success": True, **combined})

    @bp.route("/export/<collection>", methods=["GET"])
    @admin_guard.required
    def export(collection):
        """Export a collection as CSV."""
        if collection not in EXPORTABLE:
            return jsonify({
                "success": False,
                "message": "Invalid type. Use: leads, contacts, or investors"
            }), 400

        try:
            csv_text = admin_service.export_csv(collection)
        except StoreError as e:
            return _store_failure(e)

        if csv_text is None:
            return jsonify({"success": False, "message": "No data found"}), 404

        response = Response(csv_text, mimetype="text/csv")
        response.headers["Content-Disposition"] = f'attachment; filename="{collection}.csv"'
        return response

    @bp.route("/analytics", methods=["GET"])
    @admin_guard.required
    def analytics_report():
        """Get the analytics report."""
        try:
            summary = analytics_service.get_summary()
        except StoreError as e:
            return _store_failure(e)
        return jsonify(summary.to_dict())

    return bp
