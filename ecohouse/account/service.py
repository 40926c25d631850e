"""Account Service.

Sequences the auth provider, the House Registry and the Profile Store into
sign-up and sign-in. It persists nothing itself.

Sign-up runs three steps in order: create the account, resolve the
household (create or join), create the profile. The first step's failure has
no side effects. A later failure re-raises the original error; when
compensation is enabled the completed steps are undone first (house removed
or membership dropped, then the account deleted), otherwise the account is
left without a profile and can be finished later with ``complete_profile``.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date

from sqlmodel import Session

from ecohouse.account.saga import Saga
from ecohouse.auth.gotrue import OtpType, ResendType
from ecohouse.auth.service import AuthProviderProtocol, AuthResult, AuthUser
from ecohouse.core.exceptions import BadRequestError
from ecohouse.house.models import House
from ecohouse.house.service import DEFAULT_CODE_ATTEMPTS, HouseRegistry
from ecohouse.profile.exceptions import ProfileExistsError
from ecohouse.profile.models import UserProfile, VerificationStatus
from ecohouse.profile.schemas import ProfileCreate
from ecohouse.profile.service import ProfileStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignUpProfile:
    """Personal details and household choice gathered during sign-up."""

    full_name: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    is_head_of_household: bool = False
    existing_house_code: str | None = None


@dataclass(frozen=True)
class SignUpResult:
    auth: AuthResult
    profile: UserProfile
    house: House | None = None


@dataclass(frozen=True)
class SignInResult:
    auth: AuthResult
    profile: UserProfile | None = None

    @property
    def profile_complete(self) -> bool:
        return self.profile is not None


@dataclass(frozen=True)
class ProvisionResult:
    profile: UserProfile
    house: House | None = None


class AccountService:
    def __init__(
        self,
        auth: AuthProviderProtocol,
        session: Session,
        *,
        compensate: bool = True,
        max_code_attempts: int = DEFAULT_CODE_ATTEMPTS,
    ):
        self.auth = auth
        self.session = session
        self.compensate = compensate
        self.houses = HouseRegistry(session, max_code_attempts=max_code_attempts)
        self.profiles = ProfileStore(session)

    def _provision(
        self, account_id: str, email: str, details: SignUpProfile, saga: Saga
    ) -> ProvisionResult:
        """Resolve the household, then create the profile linked to it."""
        house: House | None = None
        is_head = details.is_head_of_household

        existing = self.houses.get_membership(account_id)
        if existing is not None:
            # Left over from an earlier, partially failed attempt.
            house = self.houses.get_house(existing.house_id)
            is_head = existing.is_head
        elif details.is_head_of_household:
            house = self.houses.create_house(account_id)
            created_id = house.id
            saga.add_compensation(
                "delete created house",
                lambda: self.houses.delete_house(created_id),
            )
        elif details.existing_house_code:
            house = self.houses.join_house(account_id, details.existing_house_code).house
            saga.add_compensation(
                "leave joined house",
                lambda: self.houses.leave_house(account_id),
            )
        else:
            logger.warning(
                "Provisioning without a household choice", extra={"user_id": account_id}
            )

        house_id: uuid.UUID | None = house.id if house is not None else None
        profile = self.profiles.create_profile(
            ProfileCreate(
                user_id=account_id,
                email=email,
                full_name=details.full_name,
                date_of_birth=details.date_of_birth,
                gender=details.gender,
                is_head_of_household=is_head,
                house_id=house_id,
                verification_status=VerificationStatus.pending,
            )
        )
        return ProvisionResult(profile=profile, house=house)

    async def _undo(self, saga: Saga, account_id: str) -> None:
        # The failing step may have left the session mid-transaction.
        self.session.rollback()
        failed = await saga.compensate()
        if failed:
            logger.error(
                "%s compensation incomplete: %s",
                saga.name,
                ", ".join(failed),
                extra={"user_id": account_id},
            )

    async def sign_up(
        self, email: str, password: str, details: SignUpProfile
    ) -> SignUpResult:
        """Create account, household link and profile as one logical unit.

        Raises:
            Auth errors from account creation, unchanged (no side effects)
            House/profile errors from provisioning, unchanged, after
            compensation when enabled
        """
        auth_result = await self.auth.sign_up(
            email, password, metadata={"full_name": details.full_name}
        )
        account_id = auth_result.user.id
        logger.info("Account created", extra={"user_id": account_id})

        saga = Saga("sign-up")
        saga.add_compensation(
            "delete auth account", lambda: self.auth.delete_user(account_id)
        )

        try:
            provisioned = self._provision(
                account_id, auth_result.user.email or email, details, saga
            )
        except Exception as e:
            logger.warning(
                "Sign-up provisioning failed: %s",
                type(e).__name__,
                extra={"user_id": account_id},
            )
            if self.compensate:
                await self._undo(saga, account_id)
            else:
                logger.warning(
                    "Account left without profile", extra={"user_id": account_id}
                )
            raise

        return SignUpResult(
            auth=auth_result, profile=provisioned.profile, house=provisioned.house
        )

    async def complete_profile(
        self, account: AuthUser, details: SignUpProfile
    ) -> ProvisionResult:
        """Finish provisioning for an account that has no profile.

        Reuses a membership the account already has. A house created here is
        always rolled back on failure; the account itself is left alone.

        Raises:
            ProfileExistsError: If the account already has a profile
            BadRequestError: If the account has no email address
        """
        if self.profiles.get_profile(account.id) is not None:
            raise ProfileExistsError()
        if not account.email:
            raise BadRequestError("Account has no email address")

        saga = Saga("complete-profile")
        try:
            return self._provision(account.id, account.email, details, saga)
        except Exception:
            await self._undo(saga, account.id)
            raise

    async def sign_in(self, email: str, password: str) -> SignInResult:
        """Authenticate and report whether the account has a profile.

        Raises:
            EmailNotConfirmedError: If the email OTP was never verified
            InvalidCredentialsError: If email/password invalid
        """
        auth_result = await self.auth.sign_in_with_password(email, password)
        profile = self.profiles.get_profile(auth_result.user.id)
        if profile is None:
            logger.info(
                "Signed in without a profile", extra={"user_id": auth_result.user.id}
            )
        return SignInResult(auth=auth_result, profile=profile)

    async def sign_out(self, access_token: str) -> None:
        await self.auth.sign_out(access_token)

    async def verify_otp(
        self, email: str, token: str, otp_type: OtpType = "signup"
    ) -> AuthResult:
        return await self.auth.verify_otp(email, token, otp_type)

    async def resend_otp(self, email: str, otp_type: ResendType = "signup") -> None:
        await self.auth.resend_otp(email, otp_type)
