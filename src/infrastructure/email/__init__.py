"""Email service implementations.

- StubEmailService: logs instead of sending (development/testing)
"""

from src.infrastructure.email.stub_email_service import StubEmailService

__all__ = [
    "StubEmailService",
]
