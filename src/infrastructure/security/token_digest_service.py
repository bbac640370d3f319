"""Keyed digest for token, code and reset-link lookups.

Access/refresh tokens, one-time codes and reset tokens are high-entropy or
short-lived, so a salted slow hash buys nothing and would make lookup by
value impossible. HMAC-SHA256 under a server-side key keeps the stored value
useless without the key while staying deterministic.
"""

import hashlib
import hmac

from src.core.constants import MIN_SECRET_LENGTH


class HmacTokenDigestService:
    """HMAC-SHA256 implementation of TokenDigestProtocol.

    Example:
        >>> service = HmacTokenDigestService("k" * 32)
        >>> service.digest("A1B2C3") == service.digest("A1B2C3")
        True
        >>> len(service.digest("A1B2C3"))
        64
    """

    def __init__(self, secret_key: str) -> None:
        """Initialize with the digest key.

        Raises:
            ValueError: If secret_key is shorter than 32 characters.
        """
        if len(secret_key) < MIN_SECRET_LENGTH:
            msg = f"Token hash secret must be at least {MIN_SECRET_LENGTH} characters"
            raise ValueError(msg)
        self._key = secret_key.encode("utf-8")

    def digest(self, secret: str) -> str:
        """Hex HMAC-SHA256 of the secret."""
        return hmac.new(self._key, secret.encode("utf-8"), hashlib.sha256).hexdigest()

    def matches(self, secret: str, digest: str) -> bool:
        """Constant-time check of a secret against a stored digest."""
        return hmac.compare_digest(self.digest(secret), digest)
