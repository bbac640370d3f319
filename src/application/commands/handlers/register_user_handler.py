"""Registration handler.

Flow:
1. Classify email_or_phone (EMAIL / PHONE / INVALID)
2. Check uniqueness of that contact
3. Hash password
4. Create User entity (role USER, both verification flags false)
5. Save user
6. Return Success(user_id)

A concurrent registration that slips past step 2 is caught by the unique
constraint and reported the same way.

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols)
- NO infrastructure imports (repositories are injected via protocols)
- Handler orchestrates business logic without knowing persistence details
"""

from uuid import UUID

from uuid_extensions import uuid7

from src.application.commands.auth_commands import RegisterUser
from src.core.enums import ErrorCode
from src.core.errors import (
    ConflictError,
    DomainError,
    ValidationError,
    unexpected_error,
)
from src.core.result import Failure, Result, Success
from src.domain.entities import User
from src.domain.enums import ContactKind, UserRole
from src.domain.protocols import (
    LoggerProtocol,
    PasswordHashingProtocol,
    UserAlreadyExistsError,
    UserRepository,
)
from src.domain.validators import classify_contact, normalize_contact


class RegisterUserHandler:
    """Handler for user registration command.

    Follows hexagonal architecture:
    - Application layer (this handler)
    - Domain layer (User entity, protocols)
    - Infrastructure layer (repositories, services via dependency injection)
    """

    def __init__(
        self,
        user_repo: UserRepository,
        password_service: PasswordHashingProtocol,
        logger: LoggerProtocol,
    ) -> None:
        """Initialize registration handler with dependencies.

        Args:
            user_repo: User repository for persistence
            password_service: Password hashing service
            logger: Structured logger
        """
        self._user_repo = user_repo
        self._password_service = password_service
        self._logger = logger

    async def handle(self, cmd: RegisterUser) -> Result[UUID, DomainError]:
        """Handle user registration command.

        Args:
            cmd: RegisterUser command (password strength validated upstream)

        Returns:
            Success(user_id) on successful registration
            Failure(ValidationError) for an unclassifiable contact
            Failure(ConflictError) when the email or phone is taken
        """
        try:
            # Step 1: Decide which column the contact goes into
            kind = classify_contact(cmd.email_or_phone)
            if kind is ContactKind.INVALID:
                return Failure(
                    error=ValidationError(
                        code=ErrorCode.INVALID_EMAIL_OR_PHONE,
                        message="Invalid email or phone format",
                        field="email_or_phone",
                    )
                )
            contact = normalize_contact(cmd.email_or_phone)

            # Step 2: Check uniqueness
            if kind is ContactKind.EMAIL:
                taken = await self._user_repo.exists_by_email(contact)
            else:
                taken = await self._user_repo.exists_by_phone(contact)
            if taken:
                self._logger.info("registration_rejected", reason="contact_taken", kind=kind.value)
                return Failure(error=contact_conflict(kind.value))

            # Step 3: Hash password
            password_hash = await self._password_service.hash_password_async(cmd.password)

            # Step 4: Create User entity
            user = User(
                id=uuid7(),
                email=contact if kind is ContactKind.EMAIL else None,
                phone=contact if kind is ContactKind.PHONE else None,
                password_hash=password_hash,
                first_name=cmd.first_name,
                last_name=cmd.last_name,
                role=UserRole.USER,
            )

            # Step 5: Save user
            try:
                await self._user_repo.save(user)
            except UserAlreadyExistsError as e:
                self._logger.info("registration_rejected", reason="unique_violation", kind=e.field)
                return Failure(error=contact_conflict(e.field))

            self._logger.info("user_registered", user_id=str(user.id), kind=kind.value)

            # Step 6: Return Success
            return Success(value=user.id)

        except Exception as e:
            self._logger.error("registration_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())


def contact_conflict(field: str) -> ConflictError:
    """Conflict for an email or phone that already belongs to a user."""
    if field == "phone":
        return ConflictError(
            code=ErrorCode.PHONE_ALREADY_EXISTS,
            message="Phone number already registered",
            resource_type="User",
            conflicting_field="phone",
        )
    return ConflictError(
        code=ErrorCode.EMAIL_ALREADY_EXISTS,
        message="Email already registered",
        resource_type="User",
        conflicting_field="email",
    )
