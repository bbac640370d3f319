"""Runtime environments.

Settings use the environment to pick the log renderer and whether
development-only behavior (table auto-creation) is enabled.
"""

from enum import Enum


class Environment(str, Enum):
    """Runtime environment of the auth service."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
