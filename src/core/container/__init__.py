"""Container module - Centralized dependency injection.

This module re-exports all factory functions from submodules:

    from src.core.container import get_logger, get_login_user_handler, ...

The container is organized into modules:
- infrastructure: Core services (settings, db, logging, security, delivery, social)
- repositories: Repository factories and background repository scopes
- auth_handlers: Application services and handler factories
- jobs: Sweep jobs and scheduler
"""

# Infrastructure services
from src.core.container.infrastructure import (
    build_social_registry,
    get_clock,
    get_database,
    get_db_session,
    get_email_service,
    get_logger,
    get_password_service,
    get_secret_generator,
    get_sms_service,
    get_social_registry,
    get_token_digest,
    get_token_service,
)

# Repositories
from src.core.container.repositories import (
    get_otp_repository,
    get_password_reset_token_repository,
    get_session_repository,
    get_user_repository,
    otp_repository_scope,
    password_reset_token_repository_scope,
    session_repository_scope,
)

# Services and handlers
from src.core.container.auth_handlers import (
    get_change_password_handler,
    get_complete_social_registration_handler,
    get_confirm_password_reset_token_handler,
    get_current_user_handler,
    get_forgot_password_handler,
    get_generate_otp_handler,
    get_generate_password_handler,
    get_login_user_handler,
    get_logout_user_handler,
    get_otp_service,
    get_refresh_token_handler,
    get_register_user_handler,
    get_request_password_reset_token_handler,
    get_reset_forgot_password_handler,
    get_session_service,
    get_social_login_handler,
    get_validate_password_reset_token_handler,
    get_verify_otp_handler,
)

# Background jobs
from src.core.container.jobs import get_job_scheduler, get_sweep_jobs

__all__ = [
    # Infrastructure
    "build_social_registry",
    "get_clock",
    "get_database",
    "get_db_session",
    "get_email_service",
    "get_logger",
    "get_password_service",
    "get_secret_generator",
    "get_sms_service",
    "get_social_registry",
    "get_token_digest",
    "get_token_service",
    # Repositories
    "get_otp_repository",
    "get_password_reset_token_repository",
    "get_session_repository",
    "get_user_repository",
    "otp_repository_scope",
    "password_reset_token_repository_scope",
    "session_repository_scope",
    # Services and handlers
    "get_change_password_handler",
    "get_complete_social_registration_handler",
    "get_confirm_password_reset_token_handler",
    "get_current_user_handler",
    "get_forgot_password_handler",
    "get_generate_otp_handler",
    "get_generate_password_handler",
    "get_login_user_handler",
    "get_logout_user_handler",
    "get_otp_service",
    "get_refresh_token_handler",
    "get_register_user_handler",
    "get_request_password_reset_token_handler",
    "get_reset_forgot_password_handler",
    "get_session_service",
    "get_social_login_handler",
    "get_validate_password_reset_token_handler",
    "get_verify_otp_handler",
    # Jobs
    "get_job_scheduler",
    "get_sweep_jobs",
]
