"""Client operating systems reported at login."""

from enum import Enum


class OsType(str, Enum):
    """Operating system of the device that opened a session."""

    ANDROID = "android"
    IOS = "ios"
    WEB = "web"
