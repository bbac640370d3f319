"""Classification of a free-form contact string."""

from enum import Enum


class ContactKind(str, Enum):
    """Result of classifying an ``email_or_phone`` input.

    Every input maps to exactly one member (see
    ``src.domain.validators.classify_contact``).
    """

    EMAIL = "email"
    PHONE = "phone"
    INVALID = "invalid"
