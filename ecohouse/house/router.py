"""House domain router.

Household routes. The code lookup is public so the sign-up form can check a
code before an account exists; everything else acts on the caller's own
household.
"""

from fastapi import APIRouter, Query, status

from ecohouse.core.constants import CommonResponses, Routes
from ecohouse.core.deps import CurrentAccountDep, HouseRegistryDep, ProfileStoreDep
from ecohouse.house.codes import is_valid_house_code, normalize_house_code
from ecohouse.house.exceptions import NotHeadOfHouseholdError, NotHouseMemberError
from ecohouse.house.schemas import (
    HouseCreate,
    HouseLookupResponse,
    HouseMemberRead,
    HouseRead,
    HouseUpdate,
    JoinHouseRequest,
    UserHouseRead,
)
from ecohouse.models.common import MessageResponse
from ecohouse.profile.schemas import ProfileUpdate
from ecohouse.profile.service import ProfileStore

router = APIRouter(
    prefix=Routes.HOUSE.prefix,
    tags=[Routes.HOUSE.tag],
    responses={**CommonResponses.BAD_REQUEST},
)

_AUTHENTICATED = {**CommonResponses.UNAUTHORIZED}


def _sync_profile(profiles: ProfileStore, user_id: str, updates: ProfileUpdate) -> None:
    """Mirror a membership change onto the profile, if the account has one."""
    if profiles.get_profile(user_id) is not None:
        profiles.update_profile(user_id, updates)


@router.get("/lookup", response_model=HouseLookupResponse)
async def lookup_house(
    houses: HouseRegistryDep,
    code: str = Query(min_length=1, max_length=32),
):
    """Check a house code before sign-up.

    Advisory only: a code reported as found can still fail to join.
    """
    normalized = normalize_house_code(code)
    if not is_valid_house_code(normalized):
        return HouseLookupResponse(house_code=normalized, valid_format=False, found=False)

    house = houses.get_house_by_code(normalized)
    return HouseLookupResponse(
        house_code=normalized,
        valid_format=True,
        found=house is not None,
        house_name=house.house_name if house else None,
    )


@router.get(
    "/me",
    response_model=UserHouseRead,
    responses={**_AUTHENTICATED, **CommonResponses.NOT_FOUND},
)
async def get_my_house(account: CurrentAccountDep, houses: HouseRegistryDep):
    membership = houses.get_user_house(account.id)
    if membership is None:
        raise NotHouseMemberError()
    return membership


@router.get(
    "/me/members",
    response_model=list[HouseMemberRead],
    responses={**_AUTHENTICATED, **CommonResponses.NOT_FOUND},
)
async def list_my_house_members(account: CurrentAccountDep, houses: HouseRegistryDep):
    """Members of the caller's house, head of household first."""
    membership = houses.get_membership(account.id)
    if membership is None:
        raise NotHouseMemberError()
    return houses.get_house_members(membership.house_id)


@router.post(
    "",
    response_model=HouseRead,
    status_code=status.HTTP_201_CREATED,
    responses={**_AUTHENTICATED, **CommonResponses.CONFLICT},
)
async def create_house(
    payload: HouseCreate,
    account: CurrentAccountDep,
    houses: HouseRegistryDep,
    profiles: ProfileStoreDep,
):
    """Create a house with the caller as head of household."""
    house = houses.create_house(
        account.id, house_name=payload.house_name, address=payload.address
    )
    _sync_profile(
        profiles,
        account.id,
        ProfileUpdate(house_id=house.id, is_head_of_household=True),
    )
    return house


@router.post(
    "/join",
    response_model=HouseRead,
    responses={
        **_AUTHENTICATED,
        **CommonResponses.NOT_FOUND,
        **CommonResponses.CONFLICT,
    },
)
async def join_house(
    payload: JoinHouseRequest,
    account: CurrentAccountDep,
    houses: HouseRegistryDep,
    profiles: ProfileStoreDep,
):
    result = houses.join_house(account.id, payload.house_code)
    _sync_profile(
        profiles,
        account.id,
        ProfileUpdate(house_id=result.house.id, is_head_of_household=False),
    )
    return result.house


@router.post(
    "/leave",
    response_model=MessageResponse,
    responses={
        **_AUTHENTICATED,
        **CommonResponses.NOT_FOUND,
        **CommonResponses.CONFLICT,
    },
)
async def leave_house(
    account: CurrentAccountDep,
    houses: HouseRegistryDep,
    profiles: ProfileStoreDep,
):
    """Leave the caller's house. The head of household cannot leave."""
    houses.leave_house(account.id)
    _sync_profile(profiles, account.id, ProfileUpdate(house_id=None))
    return MessageResponse(message="You have left the house")


@router.patch(
    "/me",
    response_model=HouseRead,
    responses={
        **_AUTHENTICATED,
        **CommonResponses.FORBIDDEN,
        **CommonResponses.NOT_FOUND,
    },
)
async def update_my_house(
    payload: HouseUpdate,
    account: CurrentAccountDep,
    houses: HouseRegistryDep,
):
    """Rename the house or change its address. Head of household only."""
    membership = houses.get_membership(account.id)
    if membership is None:
        raise NotHouseMemberError()
    if not membership.is_head:
        raise NotHeadOfHouseholdError()
    return houses.update_house(membership.house_id, payload)
