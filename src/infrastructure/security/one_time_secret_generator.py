"""Generators for user-typed secrets (one-time codes, reset tokens).

Both are uppercase hex so the same normalization (strip + upper) applies
wherever a user submits one.
"""

import secrets

from src.core.constants import RESET_TOKEN_BYTES


class OneTimeSecretGenerator:
    """Cryptographically random short secrets.

    Usage:
        generator = OneTimeSecretGenerator(code_length=6)
        code = generator.generate_code()         # e.g. "4F0A9C"
        token = generator.generate_reset_token()  # e.g. "9B3E01D7"
    """

    def __init__(self, code_length: int = 6) -> None:
        """Initialize generator.

        Args:
            code_length: Number of hex characters in a one-time code (4-32).
        """
        if not 4 <= code_length <= 32:
            msg = "One-time code length must be between 4 and 32"
            raise ValueError(msg)
        self._code_length = code_length

    def generate_code(self) -> str:
        """Uppercase hex one-time code of the configured length."""
        return secrets.token_hex((self._code_length + 1) // 2)[: self._code_length].upper()

    def generate_reset_token(self) -> str:
        """Uppercase hex password reset token (8 chars)."""
        return secrets.token_hex(RESET_TOKEN_BYTES).upper()
