"""Credential hashing ports.

Two distinct one-way functions are used by the auth core:

- PasswordHashingProtocol: slow, salted hashing for user passwords (bcrypt).
- TokenDigestProtocol: fast, deterministic keyed digest for high-entropy
  secrets (access/refresh tokens, one-time codes, reset tokens). Determinism
  lets the stores look records up by digest without keeping plaintext.
"""

from typing import Protocol


class PasswordHashingProtocol(Protocol):
    """Password hashing and verification interface.

    Implementations:
        - BcryptPasswordService: bcrypt with a configurable cost factor (10-20)

    Usage:
        password_hash = await hasher.hash_password_async("Secret@123")
        ok = await hasher.verify_password_async("Secret@123", password_hash)
    """

    def hash_password(self, password: str) -> str:
        """Hash a plaintext password with a fresh random salt."""
        ...

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password against a stored hash.

        Returns:
            True on match. False on mismatch or malformed hash (never raises).
        """
        ...

    async def hash_password_async(self, password: str) -> str:
        """hash_password() off the event loop."""
        ...

    async def verify_password_async(self, password: str, password_hash: str) -> bool:
        """verify_password() off the event loop."""
        ...


class TokenDigestProtocol(Protocol):
    """Deterministic keyed digest for lookup-by-hash secrets."""

    def digest(self, secret: str) -> str:
        """Return the hex digest of a secret.

        Equal inputs always produce equal digests under the same key.
        """
        ...

    def matches(self, secret: str, digest: str) -> bool:
        """Constant-time comparison of a secret against a stored digest."""
        ...
