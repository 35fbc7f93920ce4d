"""
Submissions Module

Public form intake for leads, contact messages and investor inquiries.
"""

from .factory import create_submissions_module

__all__ = ["create_submissions_module"]
