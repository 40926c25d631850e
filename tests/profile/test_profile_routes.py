"""Tests for profile domain router."""

import pytest
from sqlmodel import Session

from ecohouse.profile.models import VerificationStatus
from ecohouse.profile.schemas import ProfileCreate
from ecohouse.profile.service import ProfileStore


@pytest.fixture(name="profile")
def profile_fixture(session: Session, account):
    return ProfileStore(session).create_profile(
        ProfileCreate(user_id=account.id, email=account.email, full_name="Hana Head")
    )


def test_get_my_profile(client, profile):
    response = client.get("/profiles/me")

    assert response.status_code == 200
    body = response.json()
    assert body["user_id"] == profile.user_id
    assert body["verification_status"] == "pending"
    assert body["created_at"].endswith("Z")


def test_get_missing_profile(client):
    response = client.get("/profiles/me")

    assert response.status_code == 404
    assert response.json()["type"] == "profile_not_found"


def test_update_personal_fields(client, profile):
    response = client.patch(
        "/profiles/me", json={"full_name": "Hana H.", "gender": "female"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["full_name"] == "Hana H."
    assert body["gender"] == "female"


def test_update_ignores_household_fields(client, profile):
    response = client.patch(
        "/profiles/me", json={"is_head_of_household": True, "full_name": "Hana"}
    )

    assert response.status_code == 200
    assert response.json()["is_head_of_household"] is False


def test_update_rejects_empty_name(client, profile):
    response = client.patch("/profiles/me", json={"full_name": ""})

    assert response.status_code == 422


def test_set_verification_status(client, session: Session, profile):
    response = client.put("/profiles/me/verification", json={"status": "skipped"})

    assert response.status_code == 200
    assert response.json()["verification_status"] == "skipped"
    stored = ProfileStore(session).get_profile(profile.user_id)
    assert stored.verification_status == VerificationStatus.skipped


def test_delete_my_profile(client, session: Session, profile):
    response = client.delete("/profiles/me")

    assert response.status_code == 204
    assert ProfileStore(session).get_profile(profile.user_id) is None


def test_profile_routes_require_auth(unauthenticated_client):
    response = unauthenticated_client.get("/profiles/me")

    assert response.status_code == 401
