"""
Test cases for input sanitization and email helpers.
"""

import pytest

from intake_service.sanitizer import sanitize, is_valid_email, anonymize_email


class TestSanitize:
    """Test the sanitize function."""

    def test_empty_values_become_empty_string(self):
        """Test that None and empty input give an empty string."""
        assert sanitize(None) == ""
        assert sanitize("") == ""

    def test_strips_tags(self):
        """Test that HTML tags are removed entirely."""
        assert sanitize("<script>alert(1)</script>Jo") == "alert(1)Jo"
        assert sanitize("<b>bold</b> text") == "bold text"

    def test_escapes_special_characters(self):
        """Test that quotes and ampersands are escaped."""
        assert sanitize('Tom & "Jerry"') == "Tom &amp; &quot;Jerry&quot;"
        assert sanitize("it's") == "it&#x27;s"

    def test_lone_angle_bracket_is_escaped(self):
        """Test that an unmatched bracket survives as an entity."""
        assert sanitize("a > b") == "a &gt; b"

    def test_trims_whitespace(self):
        assert sanitize("   Jo  ") == "Jo"

    def test_truncates_to_max_length(self):
        """Test that output is capped after trimming."""
        assert sanitize("x" * 200, max_length=100) == "x" * 100
        assert len(sanitize("y" * 5000)) == 1000

    def test_non_string_input_is_stringified(self):
        assert sanitize(42) == "42"


class TestEmailHelpers:
    """Test email validation and anonymization."""

    @pytest.mark.parametrize("email", ["jo@x.com", "first.last@sub.example.org", "a+b@c.io"])
    def test_valid_emails(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", ["", None, "bad", "no@dot", "two words@x.com", "@x.com", 12])
    def test_invalid_emails(self, email):
        assert not is_valid_email(email)

    def test_anonymize_masks_local_part(self):
        """Test that only first and last characters of the local part remain."""
        assert anonymize_email("jonathan@x.com") == "j***n@x.com"

    def test_anonymize_short_local_part(self):
        assert anonymize_email("jo@x.com") == "***@x.com"

    def test_anonymize_unusual_input(self):
        assert anonymize_email(None) == "unknown"
        assert anonymize_email("not-an-email") == "invalid"
        assert anonymize_email("a@b@c") == "invalid"
