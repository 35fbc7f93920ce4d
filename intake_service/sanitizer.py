"""
Input sanitization helpers.

Every string field of a submission goes through ``sanitize`` before it is
stored, so the record store can treat its input as trusted.
"""

import re
from typing import Any

_TAG_RE = re.compile(r"<[^>]*>")
_SPECIAL_RE = re.compile(r"[<>\"'&]")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_ENTITIES = {
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "&": "&amp;",
}


def sanitize(value: Any, max_length: int = 1000) -> str:
    """Strip HTML tags, escape special characters, trim and cap the length."""
    if not value:
        return ""
    text = _TAG_RE.sub("", str(value))
    text = _SPECIAL_RE.sub(lambda m: _ENTITIES[m.group(0)], text)
    return text.strip()[:max_length]


def is_valid_email(value: Any) -> bool:
    """Loose shape check: something@something.something, no whitespace."""
    if not value or not isinstance(value, str):
        return False
    return bool(_EMAIL_RE.match(value))


def anonymize_email(email: Any) -> str:
    """Mask the local part of an address for log lines, keep the domain."""
    if not email:
        return "unknown"
    parts = str(email).split("@")
    if len(parts) != 2:
        return "invalid"
    local, domain = parts
    masked = f"{local[0]}***{local[-1]}" if len(local) > 2 else "***"
    return f"{masked}@{domain}"
