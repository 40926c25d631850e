"""Auth domain dependencies.

Authentication dependencies for FastAPI routes including get_current_account
and type aliases for authenticated account injection.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ecohouse.auth.exceptions import InvalidCredentialsError, InvalidTokenError
from ecohouse.auth.service import AuthUser, GoTrueAuthService, get_auth_service
from ecohouse.core.exceptions import AppException, ExternalServiceError, RateLimitError

SESSION_COOKIE_NAME = "session"

security = HTTPBearer(auto_error=False)

AuthServiceDep = Annotated[GoTrueAuthService, Depends(get_auth_service)]


def get_access_token(
    request: Request,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(security)
    ] = None,
) -> str:
    """Return the caller's access token.

    Looked up in priority order:
    1. Session cookie (set by sign-in for web clients)
    2. Bearer token (API clients, mobile apps)

    Raises:
        InvalidCredentialsError: If neither is present
    """
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise InvalidCredentialsError("Not authenticated")
    return token


AccessTokenDep = Annotated[str, Depends(get_access_token)]


async def get_current_account(token: AccessTokenDep, auth: AuthServiceDep) -> AuthUser:
    """Validate the access token with the auth provider.

    Raises:
        InvalidTokenError: If the provider rejects the token
        ExternalServiceError: If the provider is unconfigured or unreachable
    """
    try:
        return await auth.get_user(token)
    except (ExternalServiceError, RateLimitError):
        raise
    except AppException as e:
        raise InvalidTokenError() from e


CurrentAccountDep = Annotated[AuthUser, Depends(get_current_account)]


def require_auth(_account: CurrentAccountDep) -> None:
    """Require authentication without injecting the account.

    Use as a router-level dependency when all routes require auth:
        router = APIRouter(dependencies=[Depends(require_auth)])
    """
    pass  # Authentication already validated by CurrentAccountDep
