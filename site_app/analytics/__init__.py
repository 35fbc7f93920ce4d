"""
Analytics Module

Page-view counting, referrer history and custom event tracking.
"""

from .factory import create_analytics_module

__all__ = ["create_analytics_module"]
