"""Auth provider client.

Talks to a GoTrue-compatible auth REST API (Supabase Auth) over the shared
httpx client. Accounts, credentials, sessions and email OTPs are owned by the
provider; this module only translates calls and errors.
"""

import contextlib
import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Protocol

import httpx

from ecohouse.auth.exceptions import (
    EmailExistsError,
    EmailNotConfirmedError,
    InvalidCredentialsError,
    InvalidTokenError,
    OtpVerificationError,
    ProviderNotConfiguredError,
    UserDisabledError,
    WeakPasswordError,
)
from ecohouse.auth.gotrue import (
    BAD_REQUEST_CODES,
    EMAIL_EXISTS_CODES,
    ErrorBody,
    GOTRUE_ENDPOINT_PATHS,
    INVALID_CREDENTIALS_CODES,
    INVALID_SESSION_CODES,
    OTP_CODES,
    RATE_LIMIT_CODES,
    OtpType,
    PasswordGrantRequest,
    RefreshTokenGrantRequest,
    ResendRequest,
    ResendType,
    SessionResponse,
    SignUpRequest,
    UserResponse,
    VerifyRequest,
)
from ecohouse.core.exceptions import (
    AppException,
    BadRequestError,
    ProviderError,
    RateLimitError,
)
from ecohouse.core.http import get_auth_client
from ecohouse.core.retry import with_retry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthUser:
    """An account as reported by the auth provider."""

    id: str
    email: str | None = None
    email_confirmed: bool = False
    user_metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    refresh_token: str
    expires_in: int | None = None
    token_type: str = "bearer"


@dataclass(frozen=True)
class AuthResult:
    """User plus session; session is None while email confirmation is pending."""

    user: AuthUser
    session: AuthSession | None = None


class AuthChangeEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"


AuthStateListener = Callable[[AuthChangeEvent, AuthUser | None], None]


class AuthProviderProtocol(Protocol):
    """What the account service needs from the auth provider."""

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any] | None = None
    ) -> AuthResult: ...

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult: ...

    async def sign_out(self, access_token: str) -> None: ...

    async def verify_otp(
        self, email: str, token: str, otp_type: OtpType = "signup"
    ) -> AuthResult: ...

    async def resend_otp(self, email: str, otp_type: ResendType = "signup") -> None: ...

    async def get_user(self, access_token: str) -> AuthUser: ...

    async def delete_user(self, user_id: str) -> bool: ...


def _parse_user(data: UserResponse) -> AuthUser:
    user_id = data.get("id")
    if not user_id:
        raise ProviderError("Auth provider returned a user without an id")
    return AuthUser(
        id=user_id,
        email=data.get("email"),
        email_confirmed=bool(data.get("email_confirmed_at") or data.get("confirmed_at")),
        user_metadata=dict(data.get("user_metadata") or {}),
    )


def _parse_result(data: dict[str, Any]) -> AuthResult:
    """Accept either a session object or a bare user object."""
    if data.get("access_token"):
        session_data: SessionResponse = data  # type: ignore[assignment]
        refresh_token = session_data.get("refresh_token")
        if not refresh_token or not session_data.get("user"):
            raise ProviderError("Auth provider returned an incomplete session")
        return AuthResult(
            user=_parse_user(session_data["user"]),
            session=AuthSession(
                access_token=session_data["access_token"],
                refresh_token=refresh_token,
                expires_in=session_data.get("expires_in"),
                token_type=session_data.get("token_type", "bearer"),
            ),
        )
    if isinstance(data.get("user"), dict):
        return AuthResult(user=_parse_user(data["user"]))
    return AuthResult(user=_parse_user(data))  # type: ignore[arg-type]


class GoTrueAuthService:
    """Auth provider client.

    Handles:
    - email/password sign-up (account creation) and sign-in
    - sign-out and token refresh
    - email OTP verification and resend
    - access token validation
    - admin account deletion (used to compensate a failed sign-up)
    - auth state change notifications for in-process listeners
    """

    def __init__(
        self,
        base_url: str | None,
        anon_key: str | None,
        service_role_key: str | None = None,
    ):
        self._base_url = base_url.rstrip("/") if base_url else None
        self._anon_key = anon_key
        self._service_role_key = service_role_key
        self._listeners: list[AuthStateListener] = []

    @property
    def can_delete_users(self) -> bool:
        return bool(self._service_role_key)

    def _ensure_configured(self) -> tuple[str, str]:
        if not self._base_url or not self._anon_key:
            raise ProviderNotConfiguredError()
        return self._base_url, self._anon_key

    # -- transport -------------------------------------------------------

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Mapping[str, Any] | None = None,
        params: dict[str, str] | None = None,
        access_token: str | None = None,
        admin: bool = False,
        retry: bool = False,
    ) -> dict[str, Any]:
        """Call the auth API and return the decoded JSON body ({} if empty).

        Args:
            method: HTTP method
            endpoint: Path relative to the API base URL
            payload: JSON body
            params: Query string parameters
            access_token: User access token sent as Bearer
            admin: Authenticate with the service role key instead
            retry: Retry once on transport errors (idempotent calls only)

        Raises:
            ProviderNotConfiguredError: If URL or keys are missing
            ProviderError: If the provider is unreachable or answers oddly
            AppException subclasses: Mapped from the provider's error body
        """
        base_url, api_key = self._ensure_configured()
        if admin:
            if not self._service_role_key:
                raise ProviderNotConfiguredError("Auth admin key is not configured")
            api_key = self._service_role_key

        headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
        }
        url = f"{base_url}/{endpoint}"
        client = get_auth_client()

        async def do_request() -> httpx.Response:
            return await client.request(
                method, url, json=payload, params=params, headers=headers
            )

        def log_retry(attempt: int, error: Exception) -> None:
            logger.info(
                "Auth provider request failed, retrying: %s",
                type(error).__name__,
                extra={"attempt": attempt + 1, "path": endpoint},
            )

        try:
            response = await with_retry(
                do_request,
                attempts=2 if retry else 1,
                exceptions=(httpx.RequestError,),
                on_retry=log_retry,
            )
        except httpx.RequestError as e:
            raise ProviderError("Authentication provider unavailable") from e

        if response.status_code >= 400:
            self._handle_error_response(response)

        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError() from e
        if not isinstance(data, dict):
            raise ProviderError()
        return data

    # -- error mapping ---------------------------------------------------

    @staticmethod
    def _parse_retry_after(value: str | None) -> int | None:
        if not value:
            return None
        with contextlib.suppress(ValueError):
            parsed = int(value)
            if parsed >= 0:
                return parsed
        return None

    @staticmethod
    def _sanitize_error_code(code: str | None) -> str:
        """Keep only a safe identifier for logging."""
        if not code:
            return "UNKNOWN"
        match = re.match(r"[A-Za-z0-9_]+", code)
        return match.group(0) if match else "UNKNOWN"

    def _handle_error_response(self, response: httpx.Response) -> None:
        """Translate an auth provider error response into a domain exception."""
        retry_after = self._parse_retry_after(response.headers.get("Retry-After"))

        try:
            body = response.json()
        except ValueError as e:
            if response.status_code == 429:
                raise RateLimitError(
                    "Too many attempts, try again later", retry_after=retry_after
                ) from e
            raise ProviderError() from e
        if not isinstance(body, dict):
            body = {}
        error: ErrorBody = body

        code = error.get("error_code") or error.get("error")
        message = str(
            error.get("msg")
            or error.get("error_description")
            or error.get("message")
            or "Unknown error"
        )
        lowered = message.lower()
        logger.info(
            "Auth provider error: status=%s, code=%s",
            response.status_code,
            self._sanitize_error_code(code),
            extra={"status_code": response.status_code},
        )

        if response.status_code == 429 or code in RATE_LIMIT_CODES:
            raise RateLimitError(
                "Too many attempts, try again later", retry_after=retry_after
            )

        if code == "email_not_confirmed" or "email not confirmed" in lowered:
            raise EmailNotConfirmedError()

        if "refresh token" in lowered or code in INVALID_SESSION_CODES:
            raise InvalidTokenError("Session expired, please sign in again")

        if code in INVALID_CREDENTIALS_CODES or "invalid login credentials" in lowered:
            raise InvalidCredentialsError()

        if code in EMAIL_EXISTS_CODES or "already registered" in lowered:
            raise EmailExistsError()

        if code == "weak_password":
            reasons = (error.get("weak_password") or {}).get("reasons") or []
            raise WeakPasswordError(reasons=list(reasons))

        if code in OTP_CODES or "token has expired or is invalid" in lowered:
            raise OtpVerificationError()

        if code == "user_banned":
            raise UserDisabledError()

        if code in BAD_REQUEST_CODES or response.status_code in {400, 422}:
            raise BadRequestError(message)

        if response.status_code in {401, 403}:
            raise InvalidTokenError()

        raise ProviderError(f"Authentication failed: {self._sanitize_error_code(code)}")

    # -- auth state listeners --------------------------------------------

    def on_auth_state_change(self, callback: AuthStateListener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(callback)

        return unsubscribe

    def _emit(self, event: AuthChangeEvent, user: AuthUser | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, user)
            except Exception:
                logger.exception(
                    "Auth state listener failed", extra={"event": event.value}
                )

    # -- operations ------------------------------------------------------

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any] | None = None
    ) -> AuthResult:
        """Create an account.

        The session is None when the provider requires email confirmation.

        Raises:
            EmailExistsError: If the email is already registered
            WeakPasswordError: If the password is rejected
            RateLimitError: If sign-ups are throttled
        """
        payload: SignUpRequest = {"email": email, "password": password}
        if metadata:
            payload["data"] = metadata
        data = await self._request("POST", GOTRUE_ENDPOINT_PATHS["signup"], payload=payload)
        result = _parse_result(data)
        if result.session is not None:
            self._emit(AuthChangeEvent.SIGNED_IN, result.user)
        return result

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        """Exchange email/password for a session.

        Raises:
            InvalidCredentialsError: If email/password invalid
            EmailNotConfirmedError: If the email OTP was never verified
            UserDisabledError: If the account is banned
            RateLimitError: If rate limit exceeded
        """
        credentials: PasswordGrantRequest = {"email": email, "password": password}
        data = await self._request(
            "POST",
            GOTRUE_ENDPOINT_PATHS["token"],
            params={"grant_type": "password"},
            payload=credentials,
            retry=True,
        )
        result = _parse_result(data)
        if result.session is None:
            raise InvalidCredentialsError("Authentication failed")
        self._emit(AuthChangeEvent.SIGNED_IN, result.user)
        return result

    async def refresh_session(self, refresh_token: str) -> AuthResult:
        grant: RefreshTokenGrantRequest = {"refresh_token": refresh_token}
        data = await self._request(
            "POST",
            GOTRUE_ENDPOINT_PATHS["token"],
            params={"grant_type": "refresh_token"},
            payload=grant,
        )
        result = _parse_result(data)
        if result.session is None:
            raise InvalidTokenError("Session expired, please sign in again")
        self._emit(AuthChangeEvent.TOKEN_REFRESHED, result.user)
        return result

    async def sign_out(self, access_token: str) -> None:
        """Invalidate the session behind ``access_token``.

        An already-invalid token counts as signed out.
        """
        try:
            await self._request(
                "POST",
                GOTRUE_ENDPOINT_PATHS["logout"],
                access_token=access_token,
            )
        except InvalidTokenError:
            logger.debug("Sign-out with an already invalid session")
        self._emit(AuthChangeEvent.SIGNED_OUT, None)

    async def verify_otp(
        self, email: str, token: str, otp_type: OtpType = "signup"
    ) -> AuthResult:
        """Confirm an email with the 6-digit code the provider sent.

        Raises:
            OtpVerificationError: If the code is wrong or expired
        """
        verification: VerifyRequest = {"type": otp_type, "email": email, "token": token}
        data = await self._request(
            "POST",
            GOTRUE_ENDPOINT_PATHS["verify"],
            payload=verification,
        )
        result = _parse_result(data)
        if result.session is not None:
            self._emit(AuthChangeEvent.SIGNED_IN, result.user)
        return result

    async def resend_otp(self, email: str, otp_type: ResendType = "signup") -> None:
        resend: ResendRequest = {"type": otp_type, "email": email}
        await self._request(
            "POST",
            GOTRUE_ENDPOINT_PATHS["resend"],
            payload=resend,
        )

    async def get_user(self, access_token: str) -> AuthUser:
        """Validate an access token and return its account.

        Raises:
            InvalidTokenError: If the token is invalid or expired
        """
        data = await self._request(
            "GET",
            GOTRUE_ENDPOINT_PATHS["user"],
            access_token=access_token,
            retry=True,
        )
        return _parse_user(data)  # type: ignore[arg-type]

    async def update_user_metadata(
        self, access_token: str, metadata: dict[str, Any]
    ) -> AuthUser:
        data = await self._request(
            "PUT",
            GOTRUE_ENDPOINT_PATHS["user"],
            payload={"data": metadata},
            access_token=access_token,
        )
        user = _parse_user(data)  # type: ignore[arg-type]
        self._emit(AuthChangeEvent.USER_UPDATED, user)
        return user

    async def reset_password_for_email(self, email: str) -> None:
        await self._request(
            "POST", GOTRUE_ENDPOINT_PATHS["recover"], payload={"email": email}
        )
        self._emit(AuthChangeEvent.PASSWORD_RECOVERY, None)

    async def delete_user(self, user_id: str) -> bool:
        """Delete an account with the admin API (best-effort).

        Returns:
            True if the provider confirmed the deletion, False otherwise.
            Failures are logged, never raised.
        """
        try:
            await self._request(
                "DELETE",
                GOTRUE_ENDPOINT_PATHS["admin_user"].format(user_id=user_id),
                admin=True,
            )
        except AppException as e:
            logger.error(
                "Could not delete auth account: %s",
                e.error_type,
                extra={"user_id": user_id, "error_type": e.error_type},
            )
            return False
        return True


@lru_cache
def get_auth_service() -> GoTrueAuthService:
    """Get the process-wide auth provider client.

    Cached for the application lifetime; listeners registered at start-up
    live on this instance.
    """
    from ecohouse.core.settings import get_settings

    settings = get_settings()
    return GoTrueAuthService(
        base_url=settings.auth_api_base_url,
        anon_key=settings.auth_anon_key,
        service_role_key=settings.auth_service_role_key,
    )
