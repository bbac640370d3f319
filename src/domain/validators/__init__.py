"""Validators package exports."""

from src.domain.validators.functions import (
    EMAIL_PATTERN,
    PHONE_PATTERN,
    classify_contact,
    normalize_contact,
    validate_code_format,
    validate_email,
    validate_email_or_phone,
    validate_phone,
    validate_strong_password,
)

__all__ = [
    "EMAIL_PATTERN",
    "PHONE_PATTERN",
    "classify_contact",
    "normalize_contact",
    "validate_code_format",
    "validate_email",
    "validate_email_or_phone",
    "validate_phone",
    "validate_strong_password",
]
