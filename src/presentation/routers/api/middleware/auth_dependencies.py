"""Bearer authentication dependencies.

FastAPI dependencies for extracting the access token and resolving the
caller. A token is accepted only when its JWT is valid AND a live session
still holds it, so logout and password resets take effect immediately.

Usage:
    # Protected route (requires auth)
    @router.get("/protected")
    async def protected_route(current_user: CurrentUserDep):
        return {"user_id": str(current_user.user.id)}

    # Role-restricted route
    @router.get("/admin-only")
    async def admin_route(
        current_user: AuthenticatedUser = Depends(require_roles(UserRole.ADMIN)),
    ):
        ...
"""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.application.dtos import AuthenticatedUser
from src.application.queries import GetCurrentUser
from src.application.queries.handlers.get_current_user_handler import (
    GetCurrentUserHandler,
)
from src.core.container import get_current_user_handler
from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError, AuthorizationError
from src.core.result import Failure, Success
from src.domain.enums import UserRole
from src.presentation.routers.api.v1.errors import DomainErrorHTTPException

# auto_error=False so a missing header renders in the standard error body
bearer_scheme = HTTPBearer(auto_error=False)


async def get_access_token(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> str:
    """Raw bearer token from the Authorization header.

    The token is not validated here. Refresh and logout pass it on to
    their handlers, which apply their own rules.

    Raises:
        DomainErrorHTTPException 401: If the header is missing or empty.
    """
    if credentials is None or not credentials.credentials:
        raise DomainErrorHTTPException(
            AuthenticationError(
                code=ErrorCode.TOKEN_INVALID,
                message="Missing bearer token",
            )
        )
    return credentials.credentials


async def get_current_user(
    access_token: Annotated[str, Depends(get_access_token)],
    handler: Annotated[GetCurrentUserHandler, Depends(get_current_user_handler)],
) -> AuthenticatedUser:
    """Get current authenticated user and session.

    Args:
        access_token: Bearer token from the Authorization header.
        handler: GetCurrentUser query handler (injected).

    Returns:
        AuthenticatedUser with the user entity and its live session.

    Raises:
        DomainErrorHTTPException 401: If the token is invalid, expired or revoked.
    """
    result = await handler.handle(GetCurrentUser(access_token=access_token))

    match result:
        case Success(value=authenticated):
            return authenticated
        case Failure(error=error):
            raise DomainErrorHTTPException(error)


def require_roles(
    *permitted_roles: UserRole,
) -> Callable[..., Awaitable[AuthenticatedUser]]:
    """Create a dependency that admits only the listed roles.

    Flat check: the caller's role must be one of ``permitted_roles``.

    Raises:
        DomainErrorHTTPException 403: If the user's role is not permitted.
    """

    async def role_checker(
        current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    ) -> AuthenticatedUser:
        if current_user.user.role not in permitted_roles:
            raise DomainErrorHTTPException(
                AuthorizationError(
                    code=ErrorCode.PERMISSION_DENIED,
                    message="You do not have permission to perform this action",
                    required_permission=",".join(role.value for role in permitted_roles),
                )
            )
        return current_user

    return role_checker


# Type aliases for cleaner route signatures
AccessToken = Annotated[str, Depends(get_access_token)]
CurrentUserDep = Annotated[AuthenticatedUser, Depends(get_current_user)]
