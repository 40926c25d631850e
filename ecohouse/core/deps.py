"""Centralized dependency type aliases for FastAPI routes.

Import dependencies from this single module:
    from ecohouse.core.deps import SessionDep, SettingsDep, HouseRegistryDep
"""

from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from ecohouse.account.service import AccountService
from ecohouse.auth.dependencies import (
    AccessTokenDep,
    AuthServiceDep,
    CurrentAccountDep,
    require_auth,
)
from ecohouse.core.settings import Settings, get_settings
from ecohouse.db.engine import get_session
from ecohouse.house.service import HouseRegistry
from ecohouse.profile.service import ProfileStore

__all__ = [
    "AccessTokenDep",
    "AccountServiceDep",
    "AuthServiceDep",
    "CurrentAccountDep",
    "HouseRegistryDep",
    "ProfileStoreDep",
    "SessionDep",
    "SettingsDep",
    "require_auth",
]

# Database session
SessionDep = Annotated[Session, Depends(get_session)]

# Application settings
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_house_registry(session: SessionDep, settings: SettingsDep) -> HouseRegistry:
    return HouseRegistry(session, max_code_attempts=settings.house_code_max_attempts)


def get_profile_store(session: SessionDep) -> ProfileStore:
    return ProfileStore(session)


def get_account_service(
    auth: AuthServiceDep, session: SessionDep, settings: SettingsDep
) -> AccountService:
    # Deleting an account needs the admin key; without it there is nothing
    # to compensate on the auth side.
    compensate = settings.signup_compensation and auth.can_delete_users
    return AccountService(
        auth,
        session,
        compensate=compensate,
        max_code_attempts=settings.house_code_max_attempts,
    )


HouseRegistryDep = Annotated[HouseRegistry, Depends(get_house_registry)]
ProfileStoreDep = Annotated[ProfileStore, Depends(get_profile_store)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
