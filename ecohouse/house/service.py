"""House Registry.

Owns households, their join codes and memberships. Every public method runs
against one SQLModel session and commits its own work.
"""

import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from ecohouse.core.retry import retry_call
from ecohouse.house.codes import (
    generate_house_code,
    is_valid_house_code,
    normalize_house_code,
)
from ecohouse.house.exceptions import (
    AlreadyInHouseError,
    AlreadyMemberError,
    HeadOfHouseholdCannotLeaveError,
    HouseCodeGenerationError,
    HouseNotFoundError,
    InvalidHouseCodeError,
    NotHouseMemberError,
)
from ecohouse.house.models import House, HouseMember
from ecohouse.house.schemas import (
    HouseDetail,
    HouseMemberRead,
    HouseRead,
    HouseUpdate,
    JoinResult,
    UserHouseRead,
)
from ecohouse.profile.models import UserProfile

logger = logging.getLogger(__name__)

DEFAULT_CODE_ATTEMPTS = 5


class _HouseCodeCollision(Exception):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"house code {code} already taken")


class HouseRegistry:
    """Creates households and enrolls members into them."""

    def __init__(
        self, session: Session, max_code_attempts: int = DEFAULT_CODE_ATTEMPTS
    ):
        self.session = session
        self.max_code_attempts = max_code_attempts

    # -- lookups ---------------------------------------------------------

    def get_house(self, house_id: uuid.UUID) -> House | None:
        return self.session.get(House, house_id)

    def get_membership(self, user_id: str) -> HouseMember | None:
        return self.session.exec(
            select(HouseMember).where(HouseMember.user_id == user_id)
        ).first()

    def _find_by_code(self, house_code: str) -> House | None:
        return self.session.exec(
            select(House).where(House.house_code == normalize_house_code(house_code))
        ).first()

    def get_house_by_code(self, house_code: str) -> HouseDetail | None:
        """Return the house with its members and their profiles, or None.

        This is an advisory read: a house found here can still fail to join.

        Raises:
            InvalidHouseCodeError: If the code is malformed (no query is made)
        """
        if not is_valid_house_code(house_code):
            raise InvalidHouseCodeError()

        house = self._find_by_code(house_code)
        if house is None:
            return None

        return HouseDetail(
            **HouseRead.model_validate(house).model_dump(),
            members=self.get_house_members(house.id),
        )

    def get_user_house(self, user_id: str) -> UserHouseRead | None:
        """Return the one house the account belongs to, or None."""
        row = self.session.exec(
            select(HouseMember, House)
            .join(House, col(House.id) == col(HouseMember.house_id))
            .where(HouseMember.user_id == user_id)
        ).first()
        if row is None:
            return None

        member, house = row
        return UserHouseRead(
            user_id=member.user_id,
            is_head=member.is_head,
            joined_at=member.joined_at,
            house=HouseRead.model_validate(house),
        )

    def get_house_members(self, house_id: uuid.UUID) -> list[HouseMemberRead]:
        """All members of a house, head of household first."""
        rows = self.session.exec(
            select(HouseMember, UserProfile)
            .join(
                UserProfile,
                col(UserProfile.user_id) == col(HouseMember.user_id),
                isouter=True,
            )
            .where(HouseMember.house_id == house_id)
            .order_by(col(HouseMember.is_head).desc(), col(HouseMember.joined_at))
        ).all()

        members = []
        for member, profile in rows:
            members.append(
                HouseMemberRead(
                    user_id=member.user_id,
                    is_head=member.is_head,
                    joined_at=member.joined_at,
                    full_name=profile.full_name if profile else None,
                    email=profile.email if profile else None,
                    date_of_birth=profile.date_of_birth if profile else None,
                    gender=profile.gender if profile else None,
                )
            )
        return members

    # -- writes ----------------------------------------------------------

    def create_house(
        self,
        head_user_id: str,
        house_name: str | None = None,
        address: str | None = None,
    ) -> House:
        """Create a house with ``head_user_id`` as its head of household.

        The house row and the head's membership are committed together. A
        code that collides with an existing one is regenerated, up to
        ``max_code_attempts`` times.

        Raises:
            AlreadyInHouseError: If the account already belongs to a house
            HouseCodeGenerationError: If every generated code was taken
        """
        if self.get_membership(head_user_id) is not None:
            raise AlreadyInHouseError()

        def insert(_attempt: int) -> House:
            code = generate_house_code()
            house = House(
                house_code=code,
                head_of_household_id=head_user_id,
                house_name=house_name,
                address=address,
            )
            try:
                self.session.add(house)
                self.session.flush()
                self.session.add(
                    HouseMember(house_id=house.id, user_id=head_user_id, is_head=True)
                )
                self.session.commit()
            except IntegrityError as e:
                self.session.rollback()
                if self._find_by_code(code) is not None:
                    raise _HouseCodeCollision(code) from e
                if self.get_membership(head_user_id) is not None:
                    raise AlreadyInHouseError() from e
                raise
            self.session.refresh(house)
            return house

        def log_collision(attempt: int, error: Exception) -> None:
            logger.warning(
                "House code collision, regenerating: %s",
                error,
                extra={"user_id": head_user_id, "attempt": attempt + 1},
            )

        try:
            house = retry_call(
                insert,
                attempts=self.max_code_attempts,
                exceptions=(_HouseCodeCollision,),
                on_retry=log_collision,
            )
        except _HouseCodeCollision as e:
            logger.error(
                "Gave up generating a house code after %d attempts",
                self.max_code_attempts,
                extra={"user_id": head_user_id},
            )
            raise HouseCodeGenerationError() from e

        logger.info(
            "House %s created",
            house.house_code,
            extra={"house_id": house.id, "user_id": head_user_id},
        )
        return house

    def join_house(self, user_id: str, house_code: str) -> JoinResult:
        """Enroll ``user_id`` as a regular member of the house with ``house_code``.

        Raises:
            InvalidHouseCodeError: If the code is malformed
            HouseNotFoundError: If no house has that code
            AlreadyMemberError: If the account is already in this house
            AlreadyInHouseError: If the account is in another house, including
                when a concurrent join wins the unique constraint
        """
        if not is_valid_house_code(house_code):
            raise InvalidHouseCodeError()

        house = self._find_by_code(house_code)
        if house is None:
            raise HouseNotFoundError()

        existing = self.get_membership(user_id)
        if existing is not None:
            if existing.house_id == house.id:
                raise AlreadyMemberError()
            raise AlreadyInHouseError()

        member = HouseMember(house_id=house.id, user_id=user_id, is_head=False)
        self.session.add(member)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise AlreadyInHouseError() from e

        self.session.refresh(member)
        self.session.refresh(house)
        logger.info(
            "Member joined house %s",
            house.house_code,
            extra={"house_id": house.id, "user_id": user_id},
        )
        return JoinResult(house=house, member=member)

    def leave_house(self, user_id: str) -> uuid.UUID:
        """Remove a regular member from their house.

        Returns:
            The id of the house that was left

        Raises:
            NotHouseMemberError: If the account is in no house
            HeadOfHouseholdCannotLeaveError: If the account is the head; the
                membership is left untouched
        """
        member = self.get_membership(user_id)
        if member is None:
            raise NotHouseMemberError()
        if member.is_head:
            raise HeadOfHouseholdCannotLeaveError()

        house_id = member.house_id
        self.session.delete(member)
        self.session.commit()
        logger.info("Member left house", extra={"house_id": house_id, "user_id": user_id})
        return house_id

    def update_house(self, house_id: uuid.UUID, updates: HouseUpdate) -> House:
        """Apply a partial name/address update and stamp updated_at.

        No authorization happens here; routes check head of household.
        """
        house = self.get_house(house_id)
        if house is None:
            raise HouseNotFoundError("House not found")

        for key, value in updates.model_dump(exclude_unset=True).items():
            setattr(house, key, value)
        house.touch()

        self.session.add(house)
        self.session.commit()
        self.session.refresh(house)
        return house

    def delete_house(self, house_id: uuid.UUID) -> None:
        """Delete a house and all of its memberships (no-op if missing)."""
        house = self.get_house(house_id)
        if house is None:
            return

        members = self.session.exec(
            select(HouseMember).where(HouseMember.house_id == house_id)
        ).all()
        for member in members:
            self.session.delete(member)
        self.session.flush()
        self.session.delete(house)
        self.session.commit()
        logger.warning("House deleted", extra={"house_id": house_id})

