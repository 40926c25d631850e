"""Tests for auth domain router."""

from unittest.mock import MagicMock

from sqlmodel import Session, select

from ecohouse.auth.exceptions import (
    EmailExistsError,
    EmailNotConfirmedError,
    InvalidTokenError,
)
from ecohouse.core.exceptions import RateLimitError
from ecohouse.house.models import House
from ecohouse.house.service import HouseRegistry
from ecohouse.profile.schemas import ProfileCreate
from ecohouse.profile.service import ProfileStore

SIGN_UP_HEAD = {
    "email": "new@example.com",
    "password": "secret1",
    "full_name": "Nia New",
    "date_of_birth": "1992-03-04",
    "gender": "female",
    "is_head_of_household": True,
}


# --- POST /auth/signup ---


def test_sign_up_head_of_household(client, session: Session, mock_auth, make_auth_result):
    mock_auth.sign_up.return_value = make_auth_result("acct-new-1", "new@example.com")

    response = client.post("/auth/signup", json=SIGN_UP_HEAD)

    assert response.status_code == 201
    body = response.json()
    assert body["account"]["id"] == "acct-new-1"
    assert body["session"] is None
    assert body["email_confirmation_required"] is True
    assert body["profile"]["is_head_of_household"] is True
    assert body["profile"]["verification_status"] == "pending"
    house = session.exec(select(House)).one()
    assert body["house_code"] == house.house_code
    assert "session" not in response.cookies


def test_sign_up_with_session_sets_cookie(client, mock_auth, make_auth_result):
    mock_auth.sign_up.return_value = make_auth_result(with_session=True)

    response = client.post("/auth/signup", json=SIGN_UP_HEAD)

    assert response.status_code == 201
    assert response.json()["email_confirmation_required"] is False
    assert response.cookies.get("session") == "access-token"


def test_sign_up_joins_by_code(client, session: Session, mock_auth, make_auth_result):
    house = HouseRegistry(session).create_house("other-head")
    mock_auth.sign_up.return_value = make_auth_result()

    response = client.post(
        "/auth/signup",
        json={
            **SIGN_UP_HEAD,
            "is_head_of_household": False,
            "existing_house_code": house.house_code.lower(),
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["house_code"] == house.house_code
    assert body["profile"]["house_id"] == str(house.id)


def test_sign_up_requires_code_when_not_head(client, mock_auth):
    response = client.post(
        "/auth/signup", json={**SIGN_UP_HEAD, "is_head_of_household": False}
    )

    assert response.status_code == 422
    assert "existing_house_code" in response.json()["message"]
    mock_auth.sign_up.assert_not_called()


def test_sign_up_rejects_malformed_code(client, mock_auth):
    response = client.post(
        "/auth/signup",
        json={
            **SIGN_UP_HEAD,
            "is_head_of_household": False,
            "existing_house_code": "ECO-24-XYZ",
        },
    )

    assert response.status_code == 422
    mock_auth.sign_up.assert_not_called()


def test_sign_up_rejects_short_password(client, mock_auth):
    response = client.post("/auth/signup", json={**SIGN_UP_HEAD, "password": "12345"})

    assert response.status_code == 422


def test_sign_up_unknown_code_compensates(client, mock_auth, make_auth_result):
    mock_auth.sign_up.return_value = make_auth_result("acct-c")

    response = client.post(
        "/auth/signup",
        json={
            **SIGN_UP_HEAD,
            "is_head_of_household": False,
            "existing_house_code": "ECO-2024-NOPE00",
        },
    )

    assert response.status_code == 404
    assert response.json()["type"] == "house_not_found"
    mock_auth.delete_user.assert_awaited_once_with("acct-c")


def test_sign_up_without_admin_key_leaves_account(client, mock_auth, make_auth_result):
    mock_auth.can_delete_users = False
    mock_auth.sign_up.return_value = make_auth_result("acct-c")

    response = client.post(
        "/auth/signup",
        json={
            **SIGN_UP_HEAD,
            "is_head_of_household": False,
            "existing_house_code": "ECO-2024-NOPE00",
        },
    )

    assert response.status_code == 404
    mock_auth.delete_user.assert_not_called()


def test_sign_up_email_exists(client, mock_auth):
    mock_auth.sign_up.side_effect = EmailExistsError()

    response = client.post("/auth/signup", json=SIGN_UP_HEAD)

    assert response.status_code == 409
    assert response.json()["type"] == "email_exists"


# --- POST /auth/signin ---


def test_sign_in_sets_cookie_and_reports_profile(
    client, session: Session, mock_auth, make_auth_result
):
    ProfileStore(session).create_profile(
        ProfileCreate(user_id="acct-new-1", email="new@example.com")
    )
    mock_auth.sign_in_with_password.return_value = make_auth_result(with_session=True)

    response = client.post(
        "/auth/signin", json={"email": "new@example.com", "password": "secret1"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["profile_complete"] is True
    assert body["session"]["access_token"] == "access-token"
    assert response.cookies.get("session") == "access-token"


def test_sign_in_without_profile(client, mock_auth, make_auth_result):
    mock_auth.sign_in_with_password.return_value = make_auth_result(with_session=True)

    response = client.post(
        "/auth/signin", json={"email": "new@example.com", "password": "secret1"}
    )

    assert response.status_code == 200
    assert response.json()["profile_complete"] is False
    assert response.json()["profile"] is None


def test_sign_in_email_not_confirmed(client, mock_auth):
    mock_auth.sign_in_with_password.side_effect = EmailNotConfirmedError()

    response = client.post(
        "/auth/signin", json={"email": "new@example.com", "password": "secret1"}
    )

    assert response.status_code == 401
    assert response.json()["type"] == "email_not_confirmed"


def test_sign_in_rate_limited(client, mock_auth):
    mock_auth.sign_in_with_password.side_effect = RateLimitError(retry_after=10)

    response = client.post(
        "/auth/signin", json={"email": "new@example.com", "password": "secret1"}
    )

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "10"


# --- POST /auth/signout ---


def test_sign_out_clears_cookie(client, mock_auth):
    client.cookies.set("session", "access-token")

    response = client.post("/auth/signout")

    assert response.status_code == 200
    mock_auth.sign_out.assert_awaited_once_with("access-token")
    assert 'session=""' in response.headers["set-cookie"]


def test_sign_out_with_bearer(client, mock_auth):
    response = client.post(
        "/auth/signout", headers={"Authorization": "Bearer bearer-token"}
    )

    assert response.status_code == 200
    mock_auth.sign_out.assert_awaited_once_with("bearer-token")


def test_sign_out_requires_token(client):
    response = client.post("/auth/signout")

    assert response.status_code == 401


# --- OTP, refresh, password reset ---


def test_verify_otp(client, mock_auth, make_auth_result):
    mock_auth.verify_otp.return_value = make_auth_result(with_session=True)

    response = client.post(
        "/auth/verify-otp", json={"email": "new@example.com", "token": "123456"}
    )

    assert response.status_code == 200
    assert response.json()["account"]["email_confirmed"] is True
    assert response.cookies.get("session") == "access-token"
    mock_auth.verify_otp.assert_awaited_once_with("new@example.com", "123456", "signup")


def test_verify_otp_requires_six_digits(client, mock_auth):
    response = client.post(
        "/auth/verify-otp", json={"email": "new@example.com", "token": "12a456"}
    )

    assert response.status_code == 422
    mock_auth.verify_otp.assert_not_called()


def test_resend_otp(client, mock_auth):
    response = client.post("/auth/resend-otp", json={"email": "new@example.com"})

    assert response.status_code == 200
    mock_auth.resend_otp.assert_awaited_once_with("new@example.com", "signup")


def test_refresh(client, mock_auth, make_auth_result):
    mock_auth.refresh_session.return_value = make_auth_result(with_session=True)

    response = client.post("/auth/refresh", json={"refresh_token": "refresh-token"})

    assert response.status_code == 200
    assert response.json()["session"]["refresh_token"] == "refresh-token"


def test_refresh_expired(client, mock_auth):
    mock_auth.refresh_session.side_effect = InvalidTokenError()

    response = client.post("/auth/refresh", json={"refresh_token": "old"})

    assert response.status_code == 401


def test_password_reset_hides_unknown_email(client, mock_auth):
    mock_auth.reset_password_for_email.side_effect = EmailExistsError()

    response = client.post("/auth/password-reset", json={"email": "who@example.com"})

    assert response.status_code == 200


# --- GET /auth/me, POST /auth/complete-profile ---


def test_me_without_profile(client, account):
    response = client.get("/auth/me")

    assert response.status_code == 200
    body = response.json()
    assert body["account"]["id"] == account.id
    assert body["profile_complete"] is False


def test_me_unauthenticated(unauthenticated_client):
    response = unauthenticated_client.get("/auth/me")

    assert response.status_code == 401


def test_me_with_rejected_token(unauthenticated_client, mock_auth: MagicMock):
    mock_auth.get_user.side_effect = InvalidTokenError()

    response = unauthenticated_client.get(
        "/auth/me", headers={"Authorization": "Bearer stale"}
    )

    assert response.status_code == 401
    assert response.json()["type"] == "invalid_token"


def test_complete_profile(client, session: Session, account):
    response = client.post(
        "/auth/complete-profile",
        json={
            "full_name": "Hana Head",
            "date_of_birth": "1985-06-01",
            "gender": "female",
            "is_head_of_household": True,
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["user_id"] == account.id
    assert body["is_head_of_household"] is True
    assert HouseRegistry(session).get_membership(account.id).is_head is True


def test_complete_profile_twice(client, session: Session, account):
    ProfileStore(session).create_profile(
        ProfileCreate(user_id=account.id, email=account.email)
    )

    response = client.post(
        "/auth/complete-profile",
        json={
            "full_name": "Hana Head",
            "date_of_birth": "1985-06-01",
            "gender": "female",
            "is_head_of_household": True,
        },
    )

    assert response.status_code == 409
    assert response.json()["type"] == "profile_exists"
