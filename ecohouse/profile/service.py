"""Profile Store.

One UserProfile row per auth account. Not-found on read is a None result;
writes against a missing profile raise ProfileNotFoundError.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ecohouse.profile.exceptions import ProfileExistsError, ProfileNotFoundError
from ecohouse.profile.models import UserProfile, VerificationStatus
from ecohouse.profile.schemas import ProfileCreate, ProfileUpdate

logger = logging.getLogger(__name__)


class ProfileStore:
    def __init__(self, session: Session):
        self.session = session

    def create_profile(self, data: ProfileCreate) -> UserProfile:
        """Insert a profile; verification_status defaults to pending.

        Raises:
            ProfileExistsError: If the account already has a profile (unique
                constraint on user_id)
            IntegrityError: If house_id points at no house
        """
        values = data.model_dump()
        if values.get("verification_status") is None:
            values["verification_status"] = VerificationStatus.pending

        profile = UserProfile(**values)
        self.session.add(profile)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if self.get_profile(data.user_id) is not None:
                raise ProfileExistsError() from e
            raise

        self.session.refresh(profile)
        logger.info(
            "Profile created",
            extra={"user_id": profile.user_id, "house_id": profile.house_id},
        )
        return profile

    def get_profile(self, user_id: str) -> UserProfile | None:
        return self.session.exec(
            select(UserProfile).where(UserProfile.user_id == user_id)
        ).first()

    def update_profile(self, user_id: str, updates: ProfileUpdate) -> UserProfile:
        """Merge the fields set on ``updates`` and stamp updated_at."""
        profile = self.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError()

        for key, value in updates.model_dump(exclude_unset=True).items():
            setattr(profile, key, value)
        profile.touch()

        self.session.add(profile)
        self.session.commit()
        self.session.refresh(profile)
        return profile

    def delete_profile(self, user_id: str) -> None:
        """Hard delete. Deleting a missing profile is a no-op."""
        profile = self.get_profile(user_id)
        if profile is None:
            return
        self.session.delete(profile)
        self.session.commit()
        logger.info("Profile deleted", extra={"user_id": user_id})

    def update_verification_status(
        self, user_id: str, status: VerificationStatus
    ) -> UserProfile:
        return self.update_profile(
            user_id, ProfileUpdate(verification_status=status)
        )
