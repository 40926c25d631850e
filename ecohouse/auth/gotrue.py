"""Wire shapes of the GoTrue auth REST API (as served by Supabase Auth).

Paths are relative to ``{AUTH_URL}/auth/v1``.
https://github.com/supabase/auth#endpoints
"""

from typing import Any, Literal, NotRequired, TypedDict

GOTRUE_ENDPOINT_PATHS: dict[str, str] = {
    "signup": "signup",
    "token": "token",
    "logout": "logout",
    "verify": "verify",
    "resend": "resend",
    "user": "user",
    "recover": "recover",
    "admin_user": "admin/users/{user_id}",
}

OtpType = Literal["signup", "email", "recovery", "invite", "magiclink", "email_change"]
ResendType = Literal["signup", "email_change"]

# error_code values we translate into domain exceptions.
# https://supabase.com/docs/guides/auth/debugging/error-codes
RATE_LIMIT_CODES = frozenset(
    {
        "over_request_rate_limit",
        "over_email_send_rate_limit",
        "over_sms_send_rate_limit",
    }
)
INVALID_CREDENTIALS_CODES = frozenset({"invalid_credentials", "invalid_grant"})
EMAIL_EXISTS_CODES = frozenset({"user_already_exists", "email_exists"})
OTP_CODES = frozenset({"otp_expired", "otp_disabled"})
INVALID_SESSION_CODES = frozenset(
    {
        "bad_jwt",
        "no_authorization",
        "session_not_found",
        "session_expired",
        "refresh_token_not_found",
        "refresh_token_already_used",
    }
)
BAD_REQUEST_CODES = frozenset(
    {"validation_failed", "email_address_invalid", "bad_json", "signup_disabled"}
)


class SignUpRequest(TypedDict):
    email: str
    password: str
    data: NotRequired[dict[str, Any]]


class PasswordGrantRequest(TypedDict):
    email: str
    password: str


class RefreshTokenGrantRequest(TypedDict):
    refresh_token: str


class VerifyRequest(TypedDict):
    type: OtpType
    email: str
    token: str


class ResendRequest(TypedDict):
    type: ResendType
    email: str


class UserResponse(TypedDict, total=False):
    """A user object (GET /user, and /signup when confirmation is pending)."""

    id: str
    aud: str
    role: str
    email: str
    email_confirmed_at: str | None
    confirmed_at: str | None
    user_metadata: dict[str, Any]
    app_metadata: dict[str, Any]
    created_at: str
    updated_at: str


class SessionResponse(TypedDict, total=False):
    """A session object (token grants, /verify, /signup with autoconfirm)."""

    access_token: str
    token_type: str
    expires_in: int
    expires_at: int
    refresh_token: str
    user: UserResponse


class ErrorBody(TypedDict, total=False):
    """Error body. Newer servers send code/error_code/msg, older ones
    error/error_description."""

    code: int
    error_code: str
    msg: str
    message: str
    error: str
    error_description: str
    weak_password: dict[str, list[str]]
