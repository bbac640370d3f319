"""LoggerProtocol definition for structured logging.

Backend-agnostic structured logging port. Every message is a snake_case
event name plus key-value context.

Security:
    - NEVER log passwords, access/refresh tokens, one-time codes or reset tokens
    - Log identifiers (user_id, session_id) and outcomes instead

Usage:
    from src.core.container import get_logger

    logger = get_logger()
    logger.info("login_succeeded", user_id=str(user.id), login_type="google")

    request_logger = logger.bind(user_id=str(user.id))
    request_logger.info("session_persisted")  # user_id auto-included
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    Five standard levels plus context binding. Implementations add
    timestamp and level to every entry.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message (degraded but recoverable)."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message.

        Args:
            message: Event name.
            error: Optional exception; implementations add error_type and
                error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message (service cannot operate)."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a new logger with context included in every entry.

        The original logger is left unchanged.
        """
        ...

    def with_context(self, **context: Any) -> LoggerProtocol:
        """Alias for bind()."""
        ...
