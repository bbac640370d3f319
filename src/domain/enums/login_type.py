"""Login methods a session can be created with."""

from enum import Enum


class LoginType(str, Enum):
    """How the user proved their identity for a session.

    CREDENTIALS is handled by the password flow. Every other member must
    have a verifier registered in the social verifier registry.
    """

    CREDENTIALS = "credentials"
    GOOGLE = "google"
    APPLE = "apple"
    FACEBOOK = "facebook"
