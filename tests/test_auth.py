from datetime import datetime, timedelta, timezone

from conftest import API, auth_headers, make_user
from online_forms.models.user import User
from online_forms.utils.jwt_handler import create_access_token, create_refresh_token


def register(client, email="jane@mail.com", password="secret123", **extra):
    payload = {"name": "Jane Doe", "email": email, "password": password, **extra}
    return client.post(f"{API}/auth/register", json=payload)


def test_register_returns_user_and_tokens(client, db, sent_emails):
    response = register(client, email="Jane@Mail.com", phone="+91 98765-43210")
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["user"]["email"] == "jane@mail.com"
    assert body["data"]["user"]["email_verified"] is False
    assert "hashed_password" not in body["data"]["user"]
    assert body["data"]["access_token"]
    assert body["data"]["refresh_token"]

    user = db.query(User).filter(User.email == "jane@mail.com").one()
    assert len(user.email_verification_token) == 64
    assert sent_emails[0]["to"] == "jane@mail.com"
    assert user.email_verification_token in sent_emails[0]["body"]


def test_duplicate_registration_is_conflict(client):
    assert register(client).status_code == 201
    response = register(client, email="JANE@mail.com")
    assert response.status_code == 409
    assert response.json()["message"] == "User with this email already exists"


def test_register_validation_errors(client):
    response = register(client, password="123", phone="call me")
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    fields = {error["field"] for error in body["errors"]}
    assert {"password", "phone"} <= fields


def test_register_succeeds_when_email_fails(client, monkeypatch):
    from online_forms.services import email_service

    async def broken(message, subject, to_email):
        raise RuntimeError("SMTP down")

    monkeypatch.setattr(email_service, "send_email_with_retry", broken)
    assert register(client).status_code == 201


def test_login_and_me(client, db):
    make_user(db, email="login@mail.com", password="secret123")

    response = client.post(f"{API}/auth/login", json={"email": "login@mail.com", "password": "secret123"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["last_login"] is not None

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["data"]["user"]["email"] == "login@mail.com"


def test_login_rejects_bad_password(client, db):
    make_user(db, email="login@mail.com", password="secret123")
    response = client.post(f"{API}/auth/login", json={"email": "login@mail.com", "password": "wrong-pass"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_login_rejects_deactivated_user(client, db):
    make_user(db, email="inactive@mail.com", password="secret123", is_active=False)
    response = client.post(f"{API}/auth/login", json={"email": "inactive@mail.com", "password": "secret123"})
    assert response.status_code == 401


def test_protected_route_token_errors(client, db, user):
    assert client.get(f"{API}/auth/me").json()["message"] == "Access token is required"

    bad = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401
    assert bad.json()["message"] == "Invalid token"

    expired_token = create_access_token({"sub": user.id}, expires_delta=timedelta(seconds=-10))
    expired = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {expired_token}"})
    assert expired.status_code == 401
    assert expired.json()["message"] == "Token has expired"

    ghost = client.get(f"{API}/auth/me", headers=auth_headers("00000000-0000-0000-0000-000000000000"))
    assert ghost.json()["message"] == "User no longer exists"


def test_deactivated_user_token_is_rejected(client, db, user, user_headers):
    user.is_active = False
    db.commit()
    response = client.get(f"{API}/auth/me", headers=user_headers)
    assert response.status_code == 401
    assert response.json()["message"] == "Your account has been deactivated"


def test_refresh_token_flow(client, user):
    response = client.post(f"{API}/auth/refresh-token", json={"refresh_token": create_refresh_token({"sub": user.id})})
    assert response.status_code == 200
    assert response.json()["data"]["access_token"]

    missing = client.post(f"{API}/auth/refresh-token", json={})
    assert missing.status_code == 400

    # An access token is not accepted where a refresh token is expected
    wrong_type = client.post(
        f"{API}/auth/refresh-token",
        json={"refresh_token": create_access_token({"sub": user.id})},
    )
    assert wrong_type.status_code == 401


def test_forgot_and_reset_password(client, db, user, sent_emails):
    response = client.post(f"{API}/auth/forgot-password", json={"email": user.email})
    assert response.status_code == 200

    db.expire_all()
    token = db.query(User).filter(User.id == user.id).one().password_reset_token
    assert token and token in sent_emails[-1]["body"]

    reset = client.post(f"{API}/auth/reset-password", json={"token": token, "password": "brand-new"})
    assert reset.status_code == 200

    reused = client.post(f"{API}/auth/reset-password", json={"token": token, "password": "another1"})
    assert reused.status_code == 400

    login = client.post(f"{API}/auth/login", json={"email": user.email, "password": "brand-new"})
    assert login.status_code == 200


def test_forgot_password_unknown_email(client):
    response = client.post(f"{API}/auth/forgot-password", json={"email": "nobody@mail.com"})
    assert response.status_code == 404


def test_forgot_password_clears_token_when_email_fails(client, db, user, monkeypatch):
    from online_forms.services import email_service

    async def undelivered(message, subject, to_email):
        return False

    monkeypatch.setattr(email_service, "send_email_with_retry", undelivered)
    response = client.post(f"{API}/auth/forgot-password", json={"email": user.email})
    assert response.status_code == 500
    assert response.json()["message"] == "Failed to send password reset email"

    db.expire_all()
    assert db.query(User).filter(User.id == user.id).one().password_reset_token is None


def test_expired_reset_token_is_rejected(client, db, user):
    user.password_reset_token = "a" * 64
    user.password_reset_expires = datetime.now(timezone.utc) - timedelta(minutes=1)
    db.commit()

    response = client.post(f"{API}/auth/reset-password", json={"token": "a" * 64, "password": "brand-new"})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid or expired reset token"


def test_change_password(client, user, user_headers):
    wrong = client.post(
        f"{API}/auth/change-password",
        json={"current_password": "nope", "new_password": "changed1"},
        headers=user_headers,
    )
    assert wrong.status_code == 400

    ok = client.post(
        f"{API}/auth/change-password",
        json={"current_password": "secret123", "new_password": "changed1"},
        headers=user_headers,
    )
    assert ok.status_code == 200
    login = client.post(f"{API}/auth/login", json={"email": user.email, "password": "changed1"})
    assert login.status_code == 200


def test_verify_and_resend_verification(client, db, sent_emails):
    data = register(client).json()["data"]
    headers = {"Authorization": f"Bearer {data['access_token']}"}

    resend = client.post(f"{API}/auth/resend-verification", headers=headers)
    assert resend.status_code == 200
    assert len(sent_emails) == 2

    token = db.query(User).filter(User.email == "jane@mail.com").one().email_verification_token
    assert client.post(f"{API}/auth/verify-email", json={"token": "bogus"}).status_code == 400
    assert client.post(f"{API}/auth/verify-email", json={"token": token}).status_code == 200

    again = client.post(f"{API}/auth/resend-verification", headers=headers)
    assert again.status_code == 400
    assert again.json()["message"] == "Email is already verified"


def test_update_profile(client, user_headers):
    response = client.put(
        f"{API}/auth/profile",
        json={"name": "Renamed User", "phone": "+1 (555) 010-9999"},
        headers=user_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["user"]["name"] == "Renamed User"
    assert response.json()["data"]["user"]["phone"] == "+1 (555) 010-9999"


def test_logout(client, user_headers):
    response = client.post(f"{API}/auth/logout", headers=user_headers)
    assert response.json() == {"success": True, "message": "Logout successful"}
