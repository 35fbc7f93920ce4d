"""
Factory for creating analytics module.
"""
from intake_service.record_store import RecordStore

from config_manager import AnalyticsConfig
from .services import AnalyticsService
from .routes import create_analytics_blueprint


def create_analytics_module(store: RecordStore, site_host: str, config: AnalyticsConfig) -> dict:
    """Create analytics module with service and routes.

    Args:
        store: Record store holding the analytics document
        site_host: Own host name, excluded from referrer history
        config: Analytics retention and reporting settings

    Returns:
        Dictionary containing the service and blueprint
    """
    analytics_service = AnalyticsService(
        store=store,
        site_host=site_host,
        referrer_limit=config.referrer_limit,
        event_retention_days=config.event_retention_days,
        top_pages=config.top_pages,
        recent_referrers=config.recent_referrers
    )

    blueprint = create_analytics_blueprint(analytics_service)

    return {
        "service": analytics_service,
        "blueprint": blueprint
    }
