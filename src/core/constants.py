"""Centralized constants for internal implementation details.

Values here are fixed by protocol or provider contracts, NOT by the
deployment. Anything an operator may want to tune lives in
`src/core/config.py` instead.

Categories:
- Token lengths: sizes of generated secrets
- Provider endpoints: published key sets and issuers of social providers
- Timeouts: defaults for outbound HTTP calls
"""

# =============================================================================
# Token Lengths
# =============================================================================

RESET_TOKEN_BYTES: int = 4
"""Random bytes behind a password reset token (rendered as 8 uppercase hex chars)."""

MIN_SECRET_LENGTH: int = 32
"""Minimum length of signing/digest secrets (256 bits)."""

BCRYPT_MIN_ROUNDS: int = 10
"""Lowest accepted bcrypt work factor."""

BCRYPT_MAX_ROUNDS: int = 20
"""Highest accepted bcrypt work factor."""


# =============================================================================
# Social Provider Endpoints
# =============================================================================

GOOGLE_JWKS_URL: str = "https://www.googleapis.com/oauth2/v3/certs"
"""Google's published signing keys for ID tokens."""

GOOGLE_ISSUERS: tuple[str, ...] = ("accounts.google.com", "https://accounts.google.com")
"""Accepted `iss` values of Google ID tokens."""

APPLE_JWKS_URL: str = "https://appleid.apple.com/auth/keys"
"""Apple's published signing keys for identity tokens."""

APPLE_ISSUER: str = "https://appleid.apple.com"
"""Required `iss` value of Apple identity tokens."""

FACEBOOK_PROFILE_FIELDS: str = "id,first_name,last_name,email,picture"
"""Fields requested from the Graph API profile endpoint."""


# =============================================================================
# Timeouts
# =============================================================================

SOCIAL_HTTP_TIMEOUT_DEFAULT: float = 10.0
"""Default timeout for outbound HTTP calls (social providers, SMS) in seconds."""

RESPONSE_BODY_MAX_LENGTH: int = 500
"""Maximum characters of a provider response body kept in logs."""

