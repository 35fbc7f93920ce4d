"""
Submission Service

Validates and sanitizes lead, contact and investor submissions, builds the
stored record and hands it to the record store.
"""

import logging
from typing import Any, Mapping, Optional

from pydantic import BaseModel

from intake_service.models import ContactRecord, InvestorRecord, LeadRecord
from intake_service.record_store import CONTACTS, INVESTORS, LEADS, RecordStore, StoreError
from intake_service.sanitizer import anonymize_email, is_valid_email, sanitize

from .models import SubmissionResult

logger = logging.getLogger(__name__)

LEAD_THANKS = "Thanks for signing up! We'll be in touch soon."
CONTACT_THANKS = "Thanks for reaching out! We'll get back to you soon."
INVESTOR_THANKS = "Thanks for your interest! We'll be in touch shortly."


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


class SubmissionService:
    """Turns raw form payloads into persisted records."""

    def __init__(self, store: RecordStore):
        self.store = store

    def _validate_identity(self, form: Mapping[str, Any]) -> Optional[SubmissionResult]:
        """Name and email checks shared by every form."""
        if _is_blank(form.get("name")):
            return SubmissionResult.invalid("Name is required")
        email = form.get("email")
        if not isinstance(email, str) or not is_valid_email(email):
            return SubmissionResult.invalid("Valid email is required")
        return None

    def _persist(self, collection: str, record: BaseModel, thanks: str) -> SubmissionResult:
        try:
            self.store.append(collection, record.model_dump())
        except StoreError as e:
            logger.error(f"Error saving submission: {e.context()}, error={e}")
            return SubmissionResult.failed()
        return SubmissionResult.accepted(thanks, record.id)

    def submit_lead(self, form: Mapping[str, Any]) -> SubmissionResult:
        """Landing page signup: name, email, optional interest."""
        error = self._validate_identity(form)
        if error:
            return error

        lead = LeadRecord(
            name=sanitize(form.get("name"), 100),
            email=sanitize(form.get("email"), 254).lower(),
            interest=sanitize(form.get("interest"), 50) or "general",
        )
        result = self._persist(LEADS, lead, LEAD_THANKS)
        if result.success:
            logger.info(f"New lead signup: lead_id={lead.id}, email={anonymize_email(lead.email)}")
        return result

    def submit_contact(self, form: Mapping[str, Any]) -> SubmissionResult:
        """Contact form: name, email, message, optional subject."""
        error = self._validate_identity(form)
        if error:
            return error
        if _is_blank(form.get("message")):
            return SubmissionResult.invalid("Message is required")

        contact = ContactRecord(
            name=sanitize(form.get("name"), 100),
            email=sanitize(form.get("email"), 254).lower(),
            subject=sanitize(form.get("subject"), 100) or "General Inquiry",
            message=sanitize(form.get("message"), 5000),
        )
        result = self._persist(CONTACTS, contact, CONTACT_THANKS)
        if result.success:
            logger.info(f"New contact message: contact_id={contact.id}, subject={contact.subject}")
        return result

    def submit_investor(self, form: Mapping[str, Any]) -> SubmissionResult:
        """Investor inquiry: name, email, optional company, type and message."""
        error = self._validate_identity(form)
        if error:
            return error

        investor = InvestorRecord(
            name=sanitize(form.get("name"), 100),
            email=sanitize(form.get("email"), 254).lower(),
            company=sanitize(form.get("company"), 100),
            inquiryType=sanitize(form.get("type"), 50) or "general",
            message=sanitize(form.get("message"), 5000),
        )
        result = self._persist(INVESTORS, investor, INVESTOR_THANKS)
        if result.success:
            logger.info(f"New investor inquiry: investor_id={investor.id}, inquiry_type={investor.inquiryType}")
        return result
