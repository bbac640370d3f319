"""Credentials login handler.

Flow:
1. login_received
2. Classify email_or_phone and find the user by that column
3. Reject missing, soft-deleted or social-only users and wrong passwords
   with one indistinguishable error
4. identity_resolved
5. Issue tokens and persist the session (token_issued, session_persisted)

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols)
- NO infrastructure imports (repositories are injected via protocols)
"""

from src.application.commands.auth_commands import LoginUser
from src.application.dtos import AuthSession
from src.application.services import SessionService
from src.core.enums import ErrorCode
from src.core.errors import DomainError, ValidationError, unexpected_error
from src.core.result import Failure, Result
from src.domain.entities import User
from src.domain.enums import ContactKind, LoginType
from src.domain.protocols import LoggerProtocol, PasswordHashingProtocol, UserRepository
from src.domain.validators import classify_contact, normalize_contact


class LoginUserHandler:
    """Handler for the credentials login command."""

    def __init__(
        self,
        user_repo: UserRepository,
        password_service: PasswordHashingProtocol,
        session_service: SessionService,
        logger: LoggerProtocol,
    ) -> None:
        """Initialize login handler with dependencies.

        Args:
            user_repo: User repository for lookups.
            password_service: Password verification service.
            session_service: Creates the session and token pair.
            logger: Structured logger.
        """
        self._user_repo = user_repo
        self._password_service = password_service
        self._session_service = session_service
        self._logger = logger

    async def handle(self, cmd: LoginUser) -> Result[AuthSession, DomainError]:
        """Handle credentials login.

        Returns:
            Success(AuthSession) on successful login.
            Failure(ValidationError INVALID_CREDENTIALS) for any credential problem.
        """
        logger = self._logger.bind(login_type=LoginType.CREDENTIALS.value)
        logger.info("login_received")

        try:
            # Step 1: Classify the contact
            kind = classify_contact(cmd.email_or_phone)
            if kind is ContactKind.INVALID:
                return Failure(
                    error=ValidationError(
                        code=ErrorCode.INVALID_EMAIL_OR_PHONE,
                        message="Invalid email or phone format",
                        field="email_or_phone",
                    )
                )

            # Step 2: Find user by that column
            contact = normalize_contact(cmd.email_or_phone)
            user: User | None
            if kind is ContactKind.EMAIL:
                user = await self._user_repo.find_by_email(contact)
            else:
                user = await self._user_repo.find_by_phone(contact)

            # Step 3: Same error for every failure to prevent user enumeration
            if user is None or not user.is_active() or not user.has_password():
                logger.info("login_rejected", reason="unknown_or_passwordless")
                return Failure(error=_invalid_credentials())

            password_hash = user.password_hash or ""
            if not await self._password_service.verify_password_async(
                cmd.password, password_hash
            ):
                logger.info("login_rejected", reason="password_mismatch", user_id=str(user.id))
                return Failure(error=_invalid_credentials())

            logger.info("identity_resolved", user_id=str(user.id))

            # Step 4: Issue tokens and persist the session
            return await self._session_service.create(
                user, login_type=LoginType.CREDENTIALS, device=cmd.device
            )

        except Exception as e:
            logger.error("login_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())


def _invalid_credentials() -> ValidationError:
    return ValidationError(
        code=ErrorCode.INVALID_CREDENTIALS,
        message="Invalid credentials",
    )
