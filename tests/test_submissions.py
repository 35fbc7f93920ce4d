"""
Test cases for the submission service: validation, sanitization and
persistence of leads, contacts and investor inquiries.
"""

import threading

import pytest

from intake_service.record_store import (
    CONTACTS,
    INVESTORS,
    LEADS,
    InMemoryRecordStore,
    JsonFileRecordStore,
    LockTimeoutError,
)
from site_app.submissions.services import (
    CONTACT_THANKS,
    INVESTOR_THANKS,
    LEAD_THANKS,
    SubmissionService,
)


@pytest.fixture
def store():
    store = InMemoryRecordStore()
    store.initialize()
    return store


@pytest.fixture
def service(store):
    return SubmissionService(store)


class TestLeadSubmission:
    """Test lead signups."""

    def test_valid_lead_is_stored(self, service, store):
        """Test the landing page signup stores one sanitized lead."""
        result = service.submit_lead({"name": "Jo", "email": "JO@X.com", "interest": "racing"})

        assert result.success
        assert result.status_code == 200
        assert result.message == LEAD_THANKS

        leads = store.read_all(LEADS)
        assert len(leads) == 1
        assert leads[0]["name"] == "Jo"
        assert leads[0]["email"] == "jo@x.com"
        assert leads[0]["interest"] == "racing"
        assert leads[0]["type"] == "lead"
        assert leads[0]["id"] == result.record_id

    def test_interest_defaults_to_general(self, service, store):
        service.submit_lead({"name": "Jo", "email": "jo@x.com"})
        assert store.read_all(LEADS)[0]["interest"] == "general"

    @pytest.mark.parametrize("form,message", [
        ({"email": "jo@x.com"}, "Name is required"),
        ({"name": "   ", "email": "jo@x.com"}, "Name is required"),
        ({"name": "Jo"}, "Valid email is required"),
        ({"name": "Jo", "email": "not-an-email"}, "Valid email is required"),
        ({"name": "Jo", "email": ["jo@x.com"]}, "Valid email is required"),
    ])
    def test_invalid_lead_is_rejected(self, service, store, form, message):
        result = service.submit_lead(form)

        assert not result.success
        assert result.status_code == 400
        assert result.message == message
        assert store.read_all(LEADS) == []

    def test_markup_is_sanitized(self, service, store):
        service.submit_lead({"name": "<script>x</script>Jo & Co", "email": "jo@x.com"})
        assert store.read_all(LEADS)[0]["name"] == "xJo &amp; Co"

    def test_long_fields_are_truncated(self, service, store):
        service.submit_lead({"name": "n" * 500, "email": "jo@x.com", "interest": "i" * 500})

        lead = store.read_all(LEADS)[0]
        assert len(lead["name"]) == 100
        assert len(lead["interest"]) == 50


class TestContactSubmission:
    """Test contact form messages."""

    def test_valid_contact_is_stored(self, service, store):
        result = service.submit_contact({"name": "A", "email": "a@x.com", "message": "Hello there"})

        assert result.success
        assert result.message == CONTACT_THANKS
        contact = store.read_all(CONTACTS)[0]
        assert contact["subject"] == "General Inquiry"
        assert contact["status"] == "new"
        assert contact["message"] == "Hello there"

    def test_message_is_required(self, service, store):
        result = service.submit_contact({"name": "A", "email": "a@x.com", "message": "  "})

        assert result.status_code == 400
        assert result.message == "Message is required"
        assert store.read_all(CONTACTS) == []

    def test_concurrent_contacts_are_both_stored(self, tmp_path):
        """Test that two simultaneous contact submissions both persist."""
        store = JsonFileRecordStore(tmp_path)
        store.initialize()
        service = SubmissionService(store)
        barrier = threading.Barrier(2)
        results = {}

        def submit(name):
            barrier.wait()
            results[name] = service.submit_contact(
                {"name": name, "email": f"{name.lower()}@x.com", "message": "hi"}
            )

        threads = [threading.Thread(target=submit, args=(name,)) for name in ("A", "B")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results["A"].success and results["B"].success
        contacts = store.read_all(CONTACTS)
        assert sorted(c["name"] for c in contacts) == ["A", "B"]
        assert contacts[0]["id"] != contacts[1]["id"]


class TestInvestorSubmission:
    """Test investor inquiries."""

    def test_valid_investor_is_stored(self, service, store):
        result = service.submit_investor({
            "name": "V", "email": "v@fund.com", "company": "Fund", "type": "seed", "message": "Interested",
        })

        assert result.success
        assert result.message == INVESTOR_THANKS
        investor = store.read_all(INVESTORS)[0]
        assert investor["company"] == "Fund"
        assert investor["inquiryType"] == "seed"
        assert investor["message"] == "Interested"

    def test_optional_fields_default(self, service, store):
        service.submit_investor({"name": "V", "email": "v@fund.com"})

        investor = store.read_all(INVESTORS)[0]
        assert investor["company"] == ""
        assert investor["inquiryType"] == "general"
        assert investor["message"] == ""


class TestStoreFailures:
    """Test that storage failures become a generic failure result."""

    def test_store_error_returns_failed_result(self, service, monkeypatch, caplog):
        def broken_append(collection, record):
            raise LockTimeoutError("busy", collection=collection, operation="append")

        monkeypatch.setattr(service.store, "append", broken_append)

        result = service.submit_lead({"name": "Jo", "email": "jo@x.com"})

        assert not result.success
        assert result.status_code == 500
        assert result.message == "Server error. Please try again."
        assert "collection=leads" in caplog.text

    def test_email_is_anonymized_in_logs(self, service, caplog):
        import logging

        with caplog.at_level(logging.INFO, logger="site_app.submissions.services"):
            service.submit_lead({"name": "Jo", "email": "jonathan@x.com"})

        assert "j***n@x.com" in caplog.text
        assert "jonathan@x.com" not in caplog.text
