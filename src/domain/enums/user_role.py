"""User roles for the flat permitted-roles check.

Usage:
    from src.domain.enums import UserRole

    if user.role == UserRole.ADMIN:
        ...
"""

from enum import Enum


class UserRole(str, Enum):
    """User roles.

    String enum so the value can be embedded in access tokens and compared
    against the roles a route permits. There is no hierarchy: a route lists
    every role it accepts.
    """

    ADMIN = "admin"
    USER = "user"
