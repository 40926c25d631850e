"""Auth domain router.

Sign-up, sign-in, OTP and session routes. Handlers stay thin: the Account
Service runs the sign-up saga, the auth provider client owns credentials.
"""

import logging

from fastapi import APIRouter, Response, status

from ecohouse.account.service import SignUpProfile
from ecohouse.auth.dependencies import SESSION_COOKIE_NAME
from ecohouse.auth.schemas import (
    AccountRead,
    CompleteProfileRequest,
    MeResponse,
    PasswordResetRequest,
    RefreshRequest,
    ResendOtpRequest,
    SessionRead,
    SessionResponse,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    SignUpResponse,
    VerifyOtpRequest,
)
from ecohouse.auth.service import AuthResult, AuthSession, AuthUser
from ecohouse.core.constants import CommonResponses, Routes
from ecohouse.core.deps import (
    AccessTokenDep,
    AccountServiceDep,
    AuthServiceDep,
    CurrentAccountDep,
    ProfileStoreDep,
    SettingsDep,
)
from ecohouse.core.exceptions import AppException, ExternalServiceError, RateLimitError
from ecohouse.core.settings import Settings
from ecohouse.models.common import MessageResponse
from ecohouse.profile.schemas import ProfileRead

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix=Routes.AUTH.prefix,
    tags=[Routes.AUTH.tag],
    responses={
        **CommonResponses.BAD_REQUEST,
        **CommonResponses.RATE_LIMITED,
        **CommonResponses.PROVIDER_ERROR,
    },
)


def _account(user: AuthUser) -> AccountRead:
    return AccountRead(id=user.id, email=user.email, email_confirmed=user.email_confirmed)


def _session(session: AuthSession | None) -> SessionRead | None:
    if session is None:
        return None
    return SessionRead(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
        token_type=session.token_type,
    )


def _set_session_cookie(
    response: Response, result: AuthResult, settings: Settings
) -> None:
    if result.session is None:
        return
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=result.session.access_token,
        max_age=int(settings.session_expires_in.total_seconds()),
        httponly=True,
        secure=settings.is_secure_cookie,
        samesite="lax",
    )


def _profile_fields(data: CompleteProfileRequest | SignUpRequest) -> SignUpProfile:
    return SignUpProfile(
        full_name=data.full_name,
        date_of_birth=data.date_of_birth,
        gender=data.gender,
        is_head_of_household=data.is_head_of_household,
        existing_house_code=data.existing_house_code,
    )


@router.post(
    "/signup",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**CommonResponses.CONFLICT, **CommonResponses.NOT_FOUND},
)
async def sign_up(
    payload: SignUpRequest,
    response: Response,
    accounts: AccountServiceDep,
    settings: SettingsDep,
):
    """Create the account, link it to a household and create its profile.

    When the provider requires email confirmation no session is returned;
    the client continues with POST /auth/verify-otp.
    """
    result = await accounts.sign_up(
        payload.email, payload.password, _profile_fields(payload)
    )
    _set_session_cookie(response, result.auth, settings)

    return SignUpResponse(
        account=_account(result.auth.user),
        session=_session(result.auth.session),
        profile=ProfileRead.model_validate(result.profile),
        house_code=result.house.house_code if result.house else None,
        email_confirmation_required=result.auth.session is None,
    )


@router.post(
    "/signin",
    response_model=SignInResponse,
    responses={**CommonResponses.UNAUTHORIZED, **CommonResponses.FORBIDDEN},
)
async def sign_in(
    payload: SignInRequest,
    response: Response,
    accounts: AccountServiceDep,
    settings: SettingsDep,
):
    """Sign in with email/password and set the session cookie.

    A 401 with type ``email_not_confirmed`` means the OTP step is pending.
    """
    result = await accounts.sign_in(payload.email, payload.password)
    _set_session_cookie(response, result.auth, settings)

    return SignInResponse(
        account=_account(result.auth.user),
        session=_session(result.auth.session),
        profile=ProfileRead.model_validate(result.profile) if result.profile else None,
        profile_complete=result.profile_complete,
    )


@router.post(
    "/signout",
    response_model=MessageResponse,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def sign_out(token: AccessTokenDep, response: Response, accounts: AccountServiceDep):
    """Revoke the session and clear the session cookie."""
    response.delete_cookie(key=SESSION_COOKIE_NAME)
    await accounts.sign_out(token)
    return MessageResponse(message="Signed out")


@router.post("/verify-otp", response_model=SessionResponse)
async def verify_otp(
    payload: VerifyOtpRequest,
    response: Response,
    accounts: AccountServiceDep,
    settings: SettingsDep,
):
    """Confirm the email with the 6-digit code; signs the user in."""
    result = await accounts.verify_otp(payload.email, payload.token, payload.type)
    _set_session_cookie(response, result, settings)
    return SessionResponse(account=_account(result.user), session=_session(result.session))


@router.post("/resend-otp", response_model=MessageResponse)
async def resend_otp(payload: ResendOtpRequest, accounts: AccountServiceDep):
    await accounts.resend_otp(payload.email, payload.type)
    return MessageResponse(message="Verification code sent")


@router.post(
    "/refresh",
    response_model=SessionResponse,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def refresh(
    payload: RefreshRequest,
    response: Response,
    auth: AuthServiceDep,
    settings: SettingsDep,
):
    """Exchange a refresh token for a new session."""
    result = await auth.refresh_session(payload.refresh_token)
    _set_session_cookie(response, result, settings)
    return SessionResponse(account=_account(result.user), session=_session(result.session))


@router.post("/password-reset", response_model=MessageResponse)
async def password_reset(payload: PasswordResetRequest, auth: AuthServiceDep):
    """Ask the provider to email a password reset link.

    Always answers the same way so the route cannot be used to probe for
    registered emails.
    """
    try:
        await auth.reset_password_for_email(payload.email)
    except (RateLimitError, ExternalServiceError):
        raise
    except AppException as e:
        logger.info("Password reset request rejected: %s", e.error_type)

    return MessageResponse(
        message="If an account with that email exists, a reset link has been sent"
    )


@router.get(
    "/me",
    response_model=MeResponse,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def get_me(account: CurrentAccountDep, profiles: ProfileStoreDep):
    """Current account and whether its profile exists."""
    profile = profiles.get_profile(account.id)
    return MeResponse(
        account=_account(account),
        profile=ProfileRead.model_validate(profile) if profile else None,
        profile_complete=profile is not None,
    )


@router.post(
    "/complete-profile",
    response_model=ProfileRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        **CommonResponses.UNAUTHORIZED,
        **CommonResponses.NOT_FOUND,
        **CommonResponses.CONFLICT,
    },
)
async def complete_profile(
    payload: CompleteProfileRequest,
    account: CurrentAccountDep,
    accounts: AccountServiceDep,
):
    """Create the profile for an account whose sign-up stopped half way."""
    result = await accounts.complete_profile(account, _profile_fields(payload))
    return result.profile
