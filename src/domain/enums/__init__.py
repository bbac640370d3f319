"""Domain enums.

Available Enums:
    - LoginType: credentials or social provider used for a session
    - OtpPurpose / OtpMedium: scope and channel of one-time codes
    - ContactKind: email/phone/invalid classification of a contact string
    - OsType: client operating system
    - UserRole: roles for the permitted-roles check
"""

from src.domain.enums.contact_kind import ContactKind
from src.domain.enums.login_type import LoginType
from src.domain.enums.os_type import OsType
from src.domain.enums.otp import OtpMedium, OtpPurpose
from src.domain.enums.user_role import UserRole

__all__ = [
    "ContactKind",
    "LoginType",
    "OsType",
    "OtpMedium",
    "OtpPurpose",
    "UserRole",
]
