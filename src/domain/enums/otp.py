"""One-time code enums.

OtpPurpose scopes a code to a single flow so a code issued for one flow
can never be redeemed in another. OtpMedium records the channel it was
delivered through.
"""

from enum import Enum


class OtpPurpose(str, Enum):
    """Flow a one-time code belongs to."""

    FORGOT_PASSWORD = "forgot_password"
    EMAIL_VERIFICATION = "email_verification"
    PHONE_VERIFICATION = "phone_verification"


class OtpMedium(str, Enum):
    """Delivery channel of a one-time code."""

    EMAIL = "email"
    SMS = "sms"
