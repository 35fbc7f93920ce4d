"""
Data Models for Submissions
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class SubmissionResult:
    """Outcome of one form submission."""
    success: bool
    message: str
    status_code: int = 200
    record_id: Optional[int] = None

    @classmethod
    def accepted(cls, message: str, record_id: int) -> "SubmissionResult":
        return cls(success=True, message=message, record_id=record_id)

    @classmethod
    def invalid(cls, message: str) -> "SubmissionResult":
        return cls(success=False, message=message, status_code=400)

    @classmethod
    def failed(cls) -> "SubmissionResult":
        return cls(success=False, message="Server error. Please try again.", status_code=500)

    def to_dict(self) -> Dict[str, Any]:
        """Response body; the record id stays server-side."""
        return {"success": self.success, "message": self.message}
