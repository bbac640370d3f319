"""SQLAlchemy persistence for users, sessions, OTP records and reset tokens.

Repositories live in ``repositories/`` and take an AsyncSession; tables are
declared in ``models/``.
"""

from src.infrastructure.persistence.base import BaseModel
from src.infrastructure.persistence.database import Database

__all__ = [
    "BaseModel",
    "Database",
]
