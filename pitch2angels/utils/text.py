import re
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Printable ASCII plus tab, newline and carriage return
_NON_PRINTABLE = re.compile(r"[^\x20-\x7E\t\n\r]")


def is_valid_email(email: Optional[str]) -> bool:
    if not email or not isinstance(email, str):
        return False
    return bool(EMAIL_PATTERN.match(email.strip()))


def clean_text(value: Optional[str]) -> Optional[str]:
    """Strip emojis and other non-ASCII characters, then trim."""
    if not value:
        return value
    return _NON_PRINTABLE.sub("", value).strip()


def clean_optional(value: Optional[str]) -> Optional[str]:
    """Like clean_text, but empty results become None"""
    cleaned = clean_text(value)
    return cleaned or None


def word_count(value: Optional[str]) -> int:
    if not value or not isinstance(value, str):
        return 0
    return len(value.split())


def is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False
