"""User queries (CQRS read operations).

Queries represent requests for information. They are immutable
dataclasses with question-like names. Queries NEVER change state.
"""

from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class GetCurrentUser:
    """Resolve a bearer access token to its user.

    Attributes:
        access_token: Raw JWT from the Authorization header.

    Example:
        >>> query = GetCurrentUser(access_token="eyJ...")
        >>> result = await handler.handle(query)
    """

    access_token: str
