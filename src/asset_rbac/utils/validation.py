"""Input validation utilities."""

import re

# Simplified RFC 5322, good enough for most addresses
EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

MAX_EMAIL_LENGTH = 254


def validate_email(email: str) -> str:
    """Validate an e-mail address.

    Args:
        email: The address to validate

    Returns:
        The normalized (stripped, lowercased) address

    Raises:
        ValueError: If the address is empty, too long or malformed
    """
    if not isinstance(email, str):
        raise ValueError("Email must be a string")

    email = email.strip().lower()
    if not email:
        raise ValueError("Email cannot be empty")

    if len(email) > MAX_EMAIL_LENGTH:
        raise ValueError("Email exceeds maximum length")

    if not EMAIL_RE.match(email):
        raise ValueError("Invalid email format")

    return email
