"""Tests for ecohouse/auth/dependencies.py - request authentication."""

from unittest.mock import MagicMock

import pytest

from ecohouse.auth.dependencies import get_access_token, get_current_account
from ecohouse.auth.exceptions import InvalidCredentialsError, InvalidTokenError
from ecohouse.auth.service import AuthUser, GoTrueAuthService
from ecohouse.core.exceptions import ProviderError, RateLimitError


def make_request(cookies: dict[str, str] | None = None) -> MagicMock:
    request = MagicMock()
    request.cookies = cookies or {}
    return request


def make_credentials(token: str) -> MagicMock:
    credentials = MagicMock()
    credentials.credentials = token
    return credentials


def test_cookie_takes_priority_over_bearer():
    request = make_request({"session": "cookie-token"})

    assert get_access_token(request, make_credentials("bearer-token")) == "cookie-token"


def test_bearer_used_without_cookie():
    assert get_access_token(make_request(), make_credentials("bearer-token")) == "bearer-token"


def test_missing_token_is_not_authenticated():
    with pytest.raises(InvalidCredentialsError) as exc_info:
        get_access_token(make_request(), None)

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_valid_token_returns_account():
    auth = MagicMock(spec=GoTrueAuthService)
    auth.get_user.return_value = AuthUser(id="acct-1", email="a@example.com")

    account = await get_current_account("token", auth)

    assert account.id == "acct-1"
    auth.get_user.assert_awaited_once_with("token")


@pytest.mark.asyncio
async def test_rejected_token_becomes_invalid_token():
    auth = MagicMock(spec=GoTrueAuthService)
    auth.get_user.side_effect = InvalidCredentialsError()

    with pytest.raises(InvalidTokenError):
        await get_current_account("token", auth)


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [ProviderError(), RateLimitError()])
async def test_provider_outages_are_not_masked(error):
    auth = MagicMock(spec=GoTrueAuthService)
    auth.get_user.side_effect = error

    with pytest.raises(type(error)):
        await get_current_account("token", auth)
