"""In-memory test doubles for the domain ports.

Repositories copy entities on the way in and out so a test only sees what
was explicitly saved or updated, like with a real database.
"""

from copy import deepcopy
from dataclasses import dataclass, field
from datetime import UTC, datetime, time, timedelta
from typing import Any
from uuid import UUID

from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.entities import OtpRecord, PasswordResetToken, Session, User
from src.domain.enums import OtpPurpose
from src.domain.protocols import UserAlreadyExistsError
from src.domain.value_objects import TimeWindow


# =============================================================================
# Logger / clock
# =============================================================================


@dataclass
class LoggedEvent:
    level: str
    message: str
    context: dict[str, Any]


class RecordingLogger:
    """LoggerProtocol implementation keeping every call in ``events``."""

    def __init__(
        self,
        events: list[LoggedEvent] | None = None,
        bound: dict[str, Any] | None = None,
    ) -> None:
        self.events: list[LoggedEvent] = events if events is not None else []
        self._bound = bound or {}

    def _log(self, level: str, message: str, context: dict[str, Any]) -> None:
        self.events.append(LoggedEvent(level, message, {**self._bound, **context}))

    def debug(self, message: str, /, **context: Any) -> None:
        self._log("debug", message, context)

    def info(self, message: str, /, **context: Any) -> None:
        self._log("info", message, context)

    def warning(self, message: str, /, **context: Any) -> None:
        self._log("warning", message, context)

    def error(self, message: str, /, *, error: Exception | None = None, **context: Any) -> None:
        self._log("error", message, {**context, "error": error})

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        self._log("critical", message, {**context, "error": error})

    def bind(self, **context: Any) -> "RecordingLogger":
        return RecordingLogger(self.events, {**self._bound, **context})

    def with_context(self, **context: Any) -> "RecordingLogger":
        return self.bind(**context)

    def messages(self) -> list[str]:
        return [event.message for event in self.events]


class FixedClock:
    """Clock pinned to ``current``; rate-limit days are UTC days.

    Defaults to the real time of construction so it agrees with JWT ``exp``
    values minted by JWTService, then only moves through ``advance``.
    """

    def __init__(self, current: datetime | None = None) -> None:
        self.current = current or datetime.now(UTC).replace(microsecond=0)

    def now(self) -> datetime:
        return self.current

    def advance(self, **delta: float) -> None:
        self.current += timedelta(**delta)

    def current_day(self) -> TimeWindow:
        start = datetime.combine(self.current.date(), time.min, tzinfo=UTC)
        return TimeWindow(start, start + timedelta(days=1))

    def current_hour(self) -> TimeWindow:
        start = self.current.replace(minute=0, second=0, microsecond=0)
        return TimeWindow(start, start + timedelta(hours=1))


# =============================================================================
# Security
# =============================================================================


class PlainPasswordService:
    """Reversible "hash" so handler tests run without bcrypt."""

    def hash_password(self, password: str) -> str:
        return f"hashed:{password}"

    def verify_password(self, password: str, password_hash: str) -> bool:
        return password_hash == f"hashed:{password}"

    async def hash_password_async(self, password: str) -> str:
        return self.hash_password(password)

    async def verify_password_async(self, password: str, password_hash: str) -> bool:
        return self.verify_password(password, password_hash)


class SequenceSecretGenerator:
    """Hands out predictable codes and reset tokens."""

    def __init__(self, codes: list[str] | None = None, tokens: list[str] | None = None):
        self._codes = list(codes or ["A1B2C3", "D4E5F6", "0A0B0C", "1D1E1F", "2A2B2C"])
        self._tokens = list(tokens or ["9B3E01D7", "1234ABCD"])
        self.issued_codes: list[str] = []

    def generate_code(self) -> str:
        code = self._codes.pop(0)
        self.issued_codes.append(code)
        return code

    def generate_reset_token(self) -> str:
        return self._tokens.pop(0)


# =============================================================================
# Delivery
# =============================================================================


@dataclass
class FailingTransport:
    """Email and SMS transport that rejects every message."""

    error: DomainError
    attempts: int = 0

    async def send_email(self, to_email: str, subject: str, body: str) -> Result[str, DomainError]:
        self.attempts += 1
        return Failure(error=self.error)

    async def send_sms(self, to_phone: str, body: str) -> Result[str, DomainError]:
        self.attempts += 1
        return Failure(error=self.error)


@dataclass
class RecordingTransport:
    """Email and SMS transport keeping (to, subject, body) tuples."""

    sent: list[tuple[str, str, str]] = field(default_factory=list)

    async def send_email(self, to_email: str, subject: str, body: str) -> Result[str, DomainError]:
        self.sent.append((to_email, subject, body))
        return Success(value=f"msg-{len(self.sent)}")

    async def send_sms(self, to_phone: str, body: str) -> Result[str, DomainError]:
        self.sent.append((to_phone, "", body))
        return Success(value=f"sms-{len(self.sent)}")


# =============================================================================
# Repositories
# =============================================================================


class InMemoryUserRepository:
    """Unique email/phone across every row, soft-deleted ones included."""

    def __init__(self, users: list[User] | None = None) -> None:
        self.rows: dict[UUID, User] = {}
        for user in users or []:
            self.rows[user.id] = deepcopy(user)

    def _live(self) -> list[User]:
        return [user for user in self.rows.values() if user.deleted_at is None]

    async def find_by_id(self, user_id: UUID) -> User | None:
        user = self.rows.get(user_id)
        return deepcopy(user) if user and user.deleted_at is None else None

    async def find_by_email(self, email: str) -> User | None:
        for user in self._live():
            if user.email and user.email.lower() == email.lower():
                return deepcopy(user)
        return None

    async def find_by_phone(self, phone: str) -> User | None:
        for user in self._live():
            if user.phone == phone:
                return deepcopy(user)
        return None

    def _check_unique(self, user: User) -> None:
        for other in self.rows.values():
            if other.id == user.id:
                continue
            if user.email and other.email and other.email.lower() == user.email.lower():
                raise UserAlreadyExistsError("email")
            if user.phone and other.phone == user.phone:
                raise UserAlreadyExistsError("phone")

    async def save(self, user: User) -> None:
        self._check_unique(user)
        self.rows[user.id] = deepcopy(user)

    async def update(self, user: User) -> None:
        self._check_unique(user)
        self.rows[user.id] = deepcopy(user)

    async def soft_delete(self, user_id: UUID) -> None:
        self.rows[user_id].deleted_at = datetime.now(UTC)

    async def exists_by_email(self, email: str) -> bool:
        return await self.find_by_email(email) is not None

    async def exists_by_phone(self, phone: str) -> bool:
        return await self.find_by_phone(phone) is not None


class InMemorySessionRepository:
    def __init__(self) -> None:
        self.rows: dict[UUID, Session] = {}

    async def create(self, user_session: Session) -> UUID:
        self.rows[user_session.id] = deepcopy(user_session)
        return user_session.id

    async def find_active_by_access_token_hash(
        self, access_token_hash: str, now: datetime
    ) -> Session | None:
        for row in self.rows.values():
            if (
                row.access_token_hash == access_token_hash
                and row.deleted_at is None
                and row.access_token_expires_at > now
            ):
                return deepcopy(row)
        return None

    async def find_by_token_hashes(
        self, access_token_hash: str, refresh_token_hash: str
    ) -> Session | None:
        for row in self.rows.values():
            if (
                row.access_token_hash == access_token_hash
                and row.refresh_token_hash == refresh_token_hash
                and row.deleted_at is None
            ):
                return deepcopy(row)
        return None

    async def rotate(
        self,
        session_id: UUID,
        expected_access_token_hash: str,
        *,
        access_token_hash: str,
        access_token_expires_at: datetime,
        refresh_token_hash: str,
        refresh_token_expires_at: datetime,
    ) -> bool:
        row = self.rows.get(session_id)
        if row is None or row.access_token_hash != expected_access_token_hash:
            return False
        row.access_token_hash = access_token_hash
        row.access_token_expires_at = access_token_expires_at
        row.refresh_token_hash = refresh_token_hash
        row.refresh_token_expires_at = refresh_token_expires_at
        return True

    async def remove(self, session_id: UUID) -> bool:
        return self.rows.pop(session_id, None) is not None

    async def remove_for_device(self, user_id: UUID, device_id: str) -> int:
        doomed = [
            sid
            for sid, row in self.rows.items()
            if row.user_id == user_id and row.device_id == device_id
        ]
        for sid in doomed:
            del self.rows[sid]
        return len(doomed)

    async def remove_all_for_user(self, user_id: UUID) -> int:
        doomed = [sid for sid, row in self.rows.items() if row.user_id == user_id]
        for sid in doomed:
            del self.rows[sid]
        return len(doomed)

    async def delete_expired_batch(self, now: datetime, limit: int) -> int:
        doomed = [
            sid for sid, row in self.rows.items() if row.refresh_token_expires_at <= now
        ][:limit]
        for sid in doomed:
            del self.rows[sid]
        return len(doomed)


class InMemoryOtpRepository:
    def __init__(self) -> None:
        self.rows: dict[UUID, OtpRecord] = {}

    def _for(self, user_id: UUID, purpose: OtpPurpose, window: TimeWindow) -> list[OtpRecord]:
        return [
            row
            for row in self.rows.values()
            if row.user_id == user_id
            and row.purpose is purpose
            and window.contains(row.created_at)
        ]

    async def count_in_window(
        self, user_id: UUID, purpose: OtpPurpose, window: TimeWindow
    ) -> int:
        return len(self._for(user_id, purpose, window))

    async def mark_used_in_window(
        self, user_id: UUID, purpose: OtpPurpose, window: TimeWindow
    ) -> int:
        burned = 0
        for row in self._for(user_id, purpose, window):
            if not row.is_used:
                row.is_used = True
                burned += 1
        return burned

    async def save(self, record: OtpRecord) -> None:
        self.rows[record.id] = deepcopy(record)

    async def find_redeemable(
        self,
        code_hash: str,
        purpose: OtpPurpose,
        now: datetime,
        user_id: UUID | None = None,
        contact_hash: str | None = None,
    ) -> OtpRecord | None:
        matches = [
            row
            for row in self.rows.values()
            if row.code_hash == code_hash
            and row.purpose is purpose
            and not row.is_used
            and row.expires_at > now
            and (user_id is None or row.user_id == user_id)
            and (contact_hash is None or row.contact_hash == contact_hash)
        ]
        if not matches:
            return None
        return deepcopy(max(matches, key=lambda row: row.created_at))

    async def mark_used(self, record_id: UUID) -> bool:
        row = self.rows.get(record_id)
        if row is None or row.is_used:
            return False
        row.is_used = True
        return True

    async def mark_used_for_user(self, user_id: UUID, purpose: OtpPurpose) -> int:
        burned = 0
        for row in self.rows.values():
            if row.user_id == user_id and row.purpose is purpose and not row.is_used:
                row.is_used = True
                burned += 1
        return burned

    async def delete_expired_batch(self, now: datetime, limit: int) -> int:
        doomed = [rid for rid, row in self.rows.items() if row.expires_at <= now][:limit]
        for rid in doomed:
            del self.rows[rid]
        return len(doomed)

    async def delete_used_batch(self, limit: int) -> int:
        doomed = [rid for rid, row in self.rows.items() if row.is_used][:limit]
        for rid in doomed:
            del self.rows[rid]
        return len(doomed)


class InMemoryPasswordResetTokenRepository:
    def __init__(self) -> None:
        self.rows: dict[UUID, PasswordResetToken] = {}

    async def save(self, token: PasswordResetToken) -> None:
        self.rows[token.id] = deepcopy(token)

    async def find_by_hash(self, token_hash: str) -> PasswordResetToken | None:
        for row in self.rows.values():
            if row.token_hash == token_hash:
                return deepcopy(row)
        return None

    async def mark_used(self, token_id: UUID) -> bool:
        row = self.rows.get(token_id)
        if row is None or row.is_used:
            return False
        row.is_used = True
        return True

    async def delete_expired_batch(self, now: datetime, limit: int) -> int:
        doomed = [tid for tid, row in self.rows.items() if row.expires_at <= now][:limit]
        for tid in doomed:
            del self.rows[tid]
        return len(doomed)
