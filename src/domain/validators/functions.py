"""Centralized validation functions (DRY principle).

All validation logic defined once, reused by Annotated types
(src/domain/types.py) and by handlers that must classify raw input.
Validators are pure functions; the ``validate_*`` ones raise ValueError
so pydantic turns them into field errors.
"""

import re

from src.domain.enums import ContactKind

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")

_PASSWORD_SPECIALS = '!@#$%^&*(),.?":{}|<>_-+=[]\\/;\'`~'


def classify_contact(value: str) -> ContactKind:
    """Classify a contact string as email, phone (E.164) or invalid.

    Total and deterministic: email is tested first, so a string can never
    be both. Surrounding whitespace is ignored.

    Example:
        >>> classify_contact("a@b.com")
        <ContactKind.EMAIL: 'email'>
        >>> classify_contact("+14155550100")
        <ContactKind.PHONE: 'phone'>
        >>> classify_contact("4155550100")
        <ContactKind.INVALID: 'invalid'>
    """
    candidate = value.strip()
    if EMAIL_PATTERN.match(candidate):
        return ContactKind.EMAIL
    if PHONE_PATTERN.match(candidate):
        return ContactKind.PHONE
    return ContactKind.INVALID


def normalize_contact(value: str) -> str:
    """Return the canonical stored form of a contact (emails lowercased)."""
    candidate = value.strip()
    if classify_contact(candidate) is ContactKind.EMAIL:
        return candidate.lower()
    return candidate


def validate_email(v: str) -> str:
    """Validate email format.

    Returns:
        Normalized email (lowercase).

    Raises:
        ValueError: If email format is invalid.
    """
    if classify_contact(v) is not ContactKind.EMAIL:
        raise ValueError("Invalid email format")
    return normalize_contact(v)


def validate_phone(v: str) -> str:
    """Validate an E.164 phone number (``+`` then up to 15 digits).

    Raises:
        ValueError: If phone format is invalid.
    """
    if classify_contact(v) is not ContactKind.PHONE:
        raise ValueError("Invalid phone format, expected E.164 (e.g. +14155550100)")
    return v.strip()


def validate_email_or_phone(v: str) -> str:
    """Validate a contact that may be either an email or a phone number.

    Returns:
        Normalized contact.

    Raises:
        ValueError: If the value is neither.
    """
    if classify_contact(v) is ContactKind.INVALID:
        raise ValueError("Invalid email or phone format")
    return normalize_contact(v)


def validate_strong_password(v: str) -> str:
    """Validate password strength.

    Example:
        >>> validate_strong_password("Secret@123")
        'Secret@123'
        >>> validate_strong_password("weak")
        ValueError: Password must be at least 8 characters
    """
    if len(v) < 8:
        raise ValueError("Password must be at least 8 characters")
    if len(v) > 128:
        raise ValueError("Password must be at most 128 characters")
    if not any(c.isupper() for c in v):
        raise ValueError("Password must contain uppercase letter")
    if not any(c.islower() for c in v):
        raise ValueError("Password must contain lowercase letter")
    if not any(c.isdigit() for c in v):
        raise ValueError("Password must contain digit")
    if not any(c in _PASSWORD_SPECIALS for c in v):
        raise ValueError("Password must contain special character")
    return v


def validate_code_format(v: str) -> str:
    """Normalize a one-time code or reset token (trimmed, uppercase hex).

    Raises:
        ValueError: If the code contains non-hex characters.
    """
    candidate = v.strip().upper()
    if not candidate or not re.fullmatch(r"[0-9A-F]+", candidate):
        raise ValueError("Invalid code format")
    return candidate
