"""Domain value objects.

Immutable objects that enforce their own constraints on construction.
"""

from src.domain.value_objects.social_identity import SocialIdentity
from src.domain.value_objects.time_window import TimeWindow
from src.domain.value_objects.token_pair import AccessTokenClaims, TokenPair

__all__ = [
    "AccessTokenClaims",
    "SocialIdentity",
    "TimeWindow",
    "TokenPair",
]
