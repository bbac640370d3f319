"""Social identity verification adapters (Google, Apple, Facebook)."""

from src.infrastructure.social.apple_verifier import AppleIdentityVerifier
from src.infrastructure.social.facebook_verifier import FacebookIdentityVerifier
from src.infrastructure.social.google_verifier import GoogleIdentityVerifier
from src.infrastructure.social.jwks_key_source import JwksKeySource, SigningKey
from src.infrastructure.social.registry import SocialVerifierRegistry

__all__ = [
    "AppleIdentityVerifier",
    "FacebookIdentityVerifier",
    "GoogleIdentityVerifier",
    "JwksKeySource",
    "SigningKey",
    "SocialVerifierRegistry",
]
