"""Machine-readable error codes.

Codes follow ENTITY_REASON naming and are returned to clients verbatim as
``error_code``. Values are stable: clients branch on them.

Categories:
- Validation errors (INVALID_*, VALIDATION_*)
- Credential and OTP errors (INVALID_CREDENTIALS, OTP_*, RESET_TOKEN_*)
- Resource errors (*_NOT_FOUND)
- Conflict errors (*_ALREADY_*, *_CONFLICT)
- Token and session errors (TOKEN_*, REFRESH_*, SESSION_*)
- Authorization errors (PERMISSION_DENIED)
- Internal errors (INTERNAL_*, DATABASE_*, TOKEN_SIGNING_FAILED)
"""

from enum import Enum


class ErrorCode(Enum):
    """Machine-readable error codes."""

    # Validation errors
    VALIDATION_FAILED = "validation_failed"
    INVALID_EMAIL_OR_PHONE = "invalid_email_or_phone"
    INVALID_PASSWORD = "invalid_password"
    UNSUPPORTED_LOGIN_TYPE = "unsupported_login_type"

    # Credential errors
    INVALID_CREDENTIALS = "invalid_credentials"
    OLD_PASSWORD_MISMATCH = "old_password_mismatch"

    # OTP / reset token errors
    OTP_INVALID = "otp_invalid"
    OTP_RATE_LIMIT_EXCEEDED = "otp_rate_limit_exceeded"
    OTP_DELIVERY_FAILED = "otp_delivery_failed"
    RESET_TOKEN_INVALID = "reset_token_invalid"

    # Resource errors
    USER_NOT_FOUND = "user_not_found"

    # Conflict errors
    EMAIL_ALREADY_EXISTS = "email_already_exists"
    PHONE_ALREADY_EXISTS = "phone_already_exists"
    ALREADY_VERIFIED = "already_verified"
    PASSWORD_ALREADY_SET = "password_already_set"
    SESSION_CONFLICT = "session_conflict"

    # Token and session errors
    TOKEN_INVALID = "token_invalid"
    TOKEN_EXPIRED = "token_expired"
    ACCESS_TOKEN_NOT_EXPIRED = "access_token_not_expired"
    REFRESH_TOKEN_EXPIRED = "refresh_token_expired"
    SESSION_NOT_FOUND = "session_not_found"
    SOCIAL_TOKEN_INVALID = "social_token_invalid"

    # Authorization errors
    PERMISSION_DENIED = "permission_denied"

    # Internal errors
    INTERNAL_ERROR = "internal_error"
    DATABASE_ERROR = "database_error"
    TOKEN_SIGNING_FAILED = "token_signing_failed"
