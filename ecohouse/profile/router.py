"""Profile domain router.

The caller's own profile. Household linkage is managed by the house routes.
"""

from fastapi import APIRouter, Depends, status

from ecohouse.core.constants import CommonResponses, Routes
from ecohouse.core.deps import CurrentAccountDep, ProfileStoreDep, require_auth
from ecohouse.profile.exceptions import ProfileNotFoundError
from ecohouse.profile.schemas import (
    ProfileRead,
    ProfileUpdate,
    ProfileUpdateMe,
    VerificationStatusUpdate,
)

router = APIRouter(
    prefix=Routes.PROFILE.prefix,
    tags=[Routes.PROFILE.tag],
    dependencies=[Depends(require_auth)],
    responses={
        **CommonResponses.UNAUTHORIZED,
        **CommonResponses.NOT_FOUND,
    },
)


@router.get("/me", response_model=ProfileRead)
async def get_my_profile(account: CurrentAccountDep, profiles: ProfileStoreDep):
    profile = profiles.get_profile(account.id)
    if profile is None:
        raise ProfileNotFoundError()
    return profile


@router.patch("/me", response_model=ProfileRead)
async def update_my_profile(
    payload: ProfileUpdateMe,
    account: CurrentAccountDep,
    profiles: ProfileStoreDep,
):
    """Update the caller's personal details.

    Only full_name, date_of_birth and gender can be changed here.
    """
    updates = ProfileUpdate(**payload.model_dump(exclude_unset=True))
    return profiles.update_profile(account.id, updates)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_my_profile(account: CurrentAccountDep, profiles: ProfileStoreDep):
    """Delete the caller's profile. The auth account is not touched."""
    profiles.delete_profile(account.id)


@router.put("/me/verification", response_model=ProfileRead)
async def set_my_verification_status(
    payload: VerificationStatusUpdate,
    account: CurrentAccountDep,
    profiles: ProfileStoreDep,
):
    return profiles.update_verification_status(account.id, payload.status)
