"""UserRepository - SQLAlchemy implementation of UserRepository protocol.

Adapter for hexagonal architecture.
Maps between domain User entities and database UserModel.
"""

from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.user import User
from src.domain.enums import UserRole
from src.domain.protocols import UserAlreadyExistsError
from src.infrastructure.persistence.models.user import User as UserModel


class UserRepository:
    """SQLAlchemy implementation of UserRepository protocol.

    This class does NOT inherit from UserRepository protocol (Protocol uses
    structural typing). Soft-deleted rows are invisible to every lookup.

    Attributes:
        session: SQLAlchemy async session for database operations.

    Example:
        >>> async with database.get_session() as session:
        ...     repo = UserRepository(session)
        ...     user = await repo.find_by_email("user@example.com")
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def find_by_id(self, user_id: UUID) -> User | None:
        """Find user by ID."""
        stmt = select(UserModel).where(
            UserModel.id == user_id, UserModel.deleted_at.is_(None)
        )
        return await self._first(stmt)

    async def find_by_email(self, email: str) -> User | None:
        """Find user by email address (case-insensitive exact match)."""
        stmt = select(UserModel).where(
            func.lower(UserModel.email) == email.strip().lower(),
            UserModel.deleted_at.is_(None),
        )
        return await self._first(stmt)

    async def find_by_phone(self, phone: str) -> User | None:
        """Find user by E.164 phone number."""
        stmt = select(UserModel).where(
            UserModel.phone == phone.strip(), UserModel.deleted_at.is_(None)
        )
        return await self._first(stmt)

    async def save(self, user: User) -> None:
        """Create new user in database.

        Raises:
            UserAlreadyExistsError: If email or phone already exists.
        """
        user_model = self._to_model(user)
        self.session.add(user_model)
        await self._commit_unique()
        await self.session.refresh(user_model)

    async def update(self, user: User) -> None:
        """Update existing user in database.

        Raises:
            NoResultFound: If user doesn't exist.
            UserAlreadyExistsError: If a changed email or phone is taken.
        """
        stmt = select(UserModel).where(UserModel.id == user.id)
        result = await self.session.execute(stmt)
        user_model = result.scalar_one()

        user_model.email = user.email
        user_model.phone = user.phone
        user_model.password_hash = user.password_hash
        user_model.first_name = user.first_name
        user_model.last_name = user.last_name
        user_model.email_verified = user.email_verified
        user_model.phone_verified = user.phone_verified
        user_model.role = user.role.value
        user_model.social_ids = dict(user.social_ids)
        user_model.avatar_url = user.avatar_url
        user_model.updated_at = user.updated_at
        user_model.deleted_at = user.deleted_at

        await self._commit_unique()

    async def soft_delete(self, user_id: UUID) -> None:
        """Tombstone user."""
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id, UserModel.deleted_at.is_(None))
            .values(deleted_at=func.now())
        )
        await self.session.execute(stmt)
        await self.session.commit()

    async def exists_by_email(self, email: str) -> bool:
        """Check if a live user with email exists."""
        stmt = select(UserModel.id).where(
            func.lower(UserModel.email) == email.strip().lower(),
            UserModel.deleted_at.is_(None),
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def exists_by_phone(self, phone: str) -> bool:
        """Check if a live user with phone exists."""
        stmt = select(UserModel.id).where(
            UserModel.phone == phone.strip(), UserModel.deleted_at.is_(None)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def _first(self, stmt: Select[tuple[UserModel]]) -> User | None:
        result = await self.session.execute(stmt)
        user_model = result.scalar_one_or_none()
        if user_model is None:
            return None
        return self._to_domain(user_model)

    async def _commit_unique(self) -> None:
        """Commit, translating unique-constraint violations."""
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            field = "phone" if "phone" in str(e.orig) else "email"
            raise UserAlreadyExistsError(field) from e

    def _to_domain(self, user_model: UserModel) -> User:
        """Convert database model to domain entity."""
        return User(
            id=user_model.id,
            email=user_model.email,
            phone=user_model.phone,
            password_hash=user_model.password_hash,
            first_name=user_model.first_name,
            last_name=user_model.last_name,
            email_verified=user_model.email_verified,
            phone_verified=user_model.phone_verified,
            role=UserRole(user_model.role),
            social_ids=dict(user_model.social_ids or {}),
            avatar_url=user_model.avatar_url,
            created_at=user_model.created_at,
            updated_at=user_model.updated_at,
            deleted_at=user_model.deleted_at,
        )

    def _to_model(self, user: User) -> UserModel:
        """Convert domain entity to database model."""
        return UserModel(
            id=user.id,
            email=user.email,
            phone=user.phone,
            password_hash=user.password_hash,
            first_name=user.first_name,
            last_name=user.last_name,
            email_verified=user.email_verified,
            phone_verified=user.phone_verified,
            role=user.role.value,
            social_ids=dict(user.social_ids),
            avatar_url=user.avatar_url,
            created_at=user.created_at,
            updated_at=user.updated_at,
            deleted_at=user.deleted_at,
        )
