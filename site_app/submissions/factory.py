"""
Factory for creating submissions module.
"""
from intake_service.record_store import RecordStore

from site_app.security import RateLimiter
from .services import SubmissionService
from .routes import create_submission_blueprint


def create_submissions_module(store: RecordStore, form_limiter: RateLimiter) -> dict:
    """Create submissions module with service and routes.

    Args:
        store: Record store the submissions are appended to
        form_limiter: Rate limiter for the form endpoints

    Returns:
        Dictionary containing the service and blueprint
    """
    submission_service = SubmissionService(store)

    blueprint = create_submission_blueprint(
        submission_service=submission_service,
        form_limiter=form_limiter
    )

    return {
        "service": submission_service,
        "blueprint": blueprint
    }
