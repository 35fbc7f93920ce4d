"""
Data Models for Analytics

Defines the report returned to the admin dashboard. The stored analytics
document itself stays a plain dict so it round-trips through the record
store unchanged.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class AnalyticsSummary:
    """Aggregated page-view report."""

    total_views: int = 0
    today_views: int = 0
    top_pages: List[Dict[str, Any]] = field(default_factory=list)
    daily: Dict[str, Dict[str, int]] = field(default_factory=dict)
    recent_referrers: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape the dashboard reads."""
        return {
            "success": True,
            "summary": {
                "totalViews": self.total_views,
                "todayViews": self.today_views,
                "topPages": self.top_pages,
            },
            "daily": self.daily,
            "recentReferrers": self.recent_referrers,
        }
