"""Annotated types with centralized validation (DRY principle).

Define validation once, use in every request schema. Each type combines
pydantic Field constraints with an AfterValidator from src/domain/validators.

Usage:
    from src.domain.types import EmailOrPhone, Password

    class RegisterRequest(BaseModel):
        email_or_phone: EmailOrPhone
        password: Password
"""

from typing import Annotated

from pydantic import AfterValidator, Field

from src.domain.validators import (
    validate_code_format,
    validate_email,
    validate_email_or_phone,
    validate_phone,
    validate_strong_password,
)

# ============================================================================
# Contact Types
# ============================================================================

EmailOrPhone = Annotated[
    str,
    Field(
        min_length=3,
        max_length=255,
        description="Email address or E.164 phone number",
        examples=["a@b.com", "+14155550100"],
    ),
    AfterValidator(validate_email_or_phone),
]
"""Contact that identifies a user: email (lowercased) or E.164 phone."""

Email = Annotated[
    str,
    Field(
        min_length=5,
        max_length=255,
        description="Email address",
        examples=["user@example.com"],
    ),
    AfterValidator(validate_email),
]

Phone = Annotated[
    str,
    Field(
        min_length=3,
        max_length=16,
        description="E.164 phone number",
        examples=["+14155550100"],
    ),
    AfterValidator(validate_phone),
]

# ============================================================================
# Secret Types
# ============================================================================

Password = Annotated[
    str,
    Field(
        min_length=8,
        max_length=128,
        description="Password with strength requirements",
        examples=["Secret@123"],
    ),
    AfterValidator(validate_strong_password),
]
"""New password. Requires upper, lower, digit and special character."""

LoginPassword = Annotated[
    str,
    Field(
        min_length=1,
        max_length=128,
        description="Password as typed at login (no strength rules)",
    ),
]

OneTimeCode = Annotated[
    str,
    Field(
        min_length=4,
        max_length=32,
        description="One-time code or password reset token (hex)",
        examples=["A1B2C3"],
    ),
    AfterValidator(validate_code_format),
]
"""One-time code, normalized to uppercase."""

JwtToken = Annotated[
    str,
    Field(
        min_length=16,
        max_length=4096,
        description="Signed JWT (header.payload.signature)",
        pattern=r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*$",
    ),
]
