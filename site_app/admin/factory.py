"""
Factory for creating admin module.
"""
from intake_service.record_store import RecordStore

from site_app.analytics.services import AnalyticsService
from .auth import AdminGuard
from .services import AdminService
from .routes import create_admin_blueprint


def create_admin_module(
    store: RecordStore,
    analytics_service: AnalyticsService,
    admin_key: str,
    is_production: bool
) -> dict:
    """Create admin module with service and routes.

    Args:
        store: Record store holding the submissions
        analytics_service: Analytics service for the report endpoint
        admin_key: Shared secret expected in the X-Admin-Key header
        is_production: Whether a missing key must lock the API

    Returns:
        Dictionary containing the service, guard and blueprint
    """
    admin_service = AdminService(store)
    admin_guard = AdminGuard(admin_key, is_production)

    blueprint = create_admin_blueprint(
        admin_service=admin_service,
        analytics_service=analytics_service,
        admin_guard=admin_guard
    )

    return {
        "service": admin_service,
        "guard": admin_guard,
        "blueprint": blueprint
    }
