"""
Admin Module

Protected read access to submissions and analytics for the dashboard.
"""

from .factory import create_admin_module

__all__ = ["create_admin_module"]
