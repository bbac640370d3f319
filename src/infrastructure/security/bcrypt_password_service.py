"""Bcrypt password hashing service (adapter).

This service implements the PasswordHashingProtocol using bcrypt.

Architecture:
    - Implements PasswordHashingProtocol (no inheritance required)
    - Structural typing via Protocol
    - Injected via dependency container

Performance:
    - Cost factor is logarithmic: each +1 doubles computation time
    - 10 = ~60ms, 12 = ~250ms, 14 = ~1000ms
    - The async wrappers run bcrypt in a worker thread so a login burst
      does not stall the event loop
"""

import asyncio

import bcrypt

from src.core.constants import BCRYPT_MAX_ROUNDS, BCRYPT_MIN_ROUNDS


class BcryptPasswordService:
    """Bcrypt password hashing service.

    Usage:
        from src.core.container import get_password_service

        password_service = get_password_service()
        password_hash = await password_service.hash_password_async("Secret@123")
        is_valid = await password_service.verify_password_async("Secret@123", password_hash)
    """

    def __init__(self, cost_factor: int = 10) -> None:
        """Initialize bcrypt password service.

        Args:
            cost_factor: Bcrypt cost factor (10-20, default: 10).

        Raises:
            ValueError: If cost_factor is outside 10..20.
        """
        if cost_factor < BCRYPT_MIN_ROUNDS:
            msg = f"Cost factor must be at least {BCRYPT_MIN_ROUNDS} for security"
            raise ValueError(msg)
        if cost_factor > BCRYPT_MAX_ROUNDS:
            msg = f"Cost factor above {BCRYPT_MAX_ROUNDS} is impractically slow"
            raise ValueError(msg)

        self._cost_factor = cost_factor

    @property
    def cost_factor(self) -> int:
        """Configured work factor."""
        return self._cost_factor

    def hash_password(self, password: str) -> str:
        """Hash a plaintext password using bcrypt.

        Args:
            password: Plaintext password to hash.

        Returns:
            Hashed password string (bcrypt format: $2b$<cost>$...), 60 chars.

        Example:
            >>> service = BcryptPasswordService(cost_factor=10)
            >>> service.hash_password("Secret@123") != service.hash_password("Secret@123")
            True
        """
        salt = bcrypt.gensalt(rounds=self._cost_factor)
        password_hash = bcrypt.hashpw(password.encode("utf-8"), salt)
        return password_hash.decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password against a bcrypt hash.

        Returns:
            True if password matches hash, False otherwise (including a
            malformed or empty hash).
        """
        if not password_hash:
            return False
        try:
            # bcrypt.checkpw does constant-time comparison
            return bcrypt.checkpw(
                password.encode("utf-8"), password_hash.encode("utf-8")
            )
        except (ValueError, AttributeError):
            # Invalid hash format or encoding error
            return False

    async def hash_password_async(self, password: str) -> str:
        """Hash in a worker thread."""
        return await asyncio.to_thread(self.hash_password, password)

    async def verify_password_async(self, password: str, password_hash: str) -> bool:
        """Verify in a worker thread."""
        return await asyncio.to_thread(self.verify_password, password, password_hash)
