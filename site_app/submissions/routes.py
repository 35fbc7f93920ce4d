"""
Submission Routes

Flask routes for the public lead, contact and investor forms.
"""

from typing import Any, Dict

from flask import Blueprint, jsonify, request

from site_app.security import RateLimiter, csrf_protected, rate_limited

from .models import SubmissionResult
from .services import SubmissionService


def _form_payload() -> Dict[str, Any]:
    """Accept both JSON bodies and urlencoded forms."""
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return payload
    return request.form.to_dict()


def _respond(result: SubmissionResult):
    return jsonify(result.to_dict()), result.status_code


def create_submission_blueprint(
    submission_service: SubmissionService,
    form_limiter: RateLimiter
) -> Blueprint:
    """Create submission blueprint with routes.

    Args:
        submission_service: The submission service instance
        form_limiter: Rate limiter shared by all form endpoints

    Returns:
        Flask blueprint with submission routes
    """
    bp = Blueprint('submissions', __name__, url_prefix='/api')

    @bp.route("/leads", methods=["POST"])
    @rate_limited(form_limiter, "forms")
    @csrf_protected
    def submit_lead():
        """Lead signup from the landing page."""
        return _respond(submission_service.submit_lead(_form_payload()))

    @bp.route("/contact", methods=["POST"])
    @rate_limited(form_limiter, "forms")
    @csrf_protected
    def submit_contact():
        """Contact form submission."""
        return _respond(submission_service.submit_contact(_form_payload()))

    @bp.route("/investors", methods=["POST"])
    @rate_limited(form_limiter, "forms")
    @csrf_protected
    def submit_investor():
        """Investor inquiry submission."""
        return _respond(submission_service.submit_investor(_form_payload()))

    return bp
