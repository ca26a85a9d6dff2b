from datetime import datetime, timedelta, timezone

import pytest

from storefront.application.services import auth_service
from storefront.core.exceptions import EntityNotFoundException, InvalidOrExpiredCodeException
from storefront.core.security import create_access_token
from storefront.domain.models.user import User
from storefront.main import app
from storefront.interfaces.deps import get_code_sender


class RecordingSender:
    def __init__(self):
        self.sent = []

    def send_reset_code(self, whatsapp_number, code):
        self.sent.append((whatsapp_number, code))


@pytest.fixture
def sender(client):
    recorder = RecordingSender()
    app.dependency_overrides[get_code_sender] = lambda: recorder
    return recorder


def _login(client, email, password):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_login_returns_token_and_user(client, store_admin):
    r = _login(client, "douala@example.com", "secret123")
    assert r.status_code == 200
    data = r.json()
    assert data["token"]
    assert data["tokenType"] == "bearer"
    assert data["user"]["email"] == "douala@example.com"
    assert data["user"]["isAdmin"] is True
    assert data["user"]["locationId"] == store_admin.location_id
    assert "password" not in str(data["user"]).lower()

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
    assert me.json()["id"] == store_admin.id


@pytest.mark.parametrize("email,password", [("douala@example.com", "wrong-one"), ("nobody@example.com", "secret123")])
def test_login_failure_is_uniform(client, store_admin, email, password):
    r = _login(client, email, password)
    assert r.status_code == 401
    assert r.json() == {"message": "Invalid email or password"}


def test_role_claims_in_token_are_ignored(client, customer):
    forged = create_access_token({"sub": str(customer.id), "isAdmin": True, "isSuperAdmin": True})
    r = client.get("/api/auth/users", headers={"Authorization": f"Bearer {forged}"})
    assert r.status_code == 403


def test_expired_token_is_rejected(client, store_admin):
    token = create_access_token({"sub": str(store_admin.id)}, expires_delta=timedelta(seconds=-5))
    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["message"] == "Not authorized, token failed"


def test_token_for_deleted_user_is_rejected(client, customer, auth_headers, db):
    headers = auth_headers(customer)
    db.delete(customer)
    db.commit()
    r = client.get("/api/auth/profile", headers=headers)
    assert r.status_code == 401
    assert r.json()["message"] == "Not authorized, user not found"


# --- Password reset ---------------------------------------------------------


def test_reset_code_window(db, store_admin):
    sender = RecordingSender()
    issued_at = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    auth_service.request_password_reset(db, "+237699000111", sender, now=issued_at)
    (number, code), = sender.sent
    assert number == "+237699000111"
    assert len(code) == 6 and code.isdigit()

    user = auth_service.verify_reset_code(db, "+237699000111", code, now=issued_at + timedelta(minutes=9, seconds=59))
    assert user.id == store_admin.id

    with pytest.raises(InvalidOrExpiredCodeException):
        auth_service.verify_reset_code(db, "+237699000111", code, now=issued_at + timedelta(minutes=10, seconds=1))


def test_wrong_code_keeps_pending_code(db, store_admin):
    sender = RecordingSender()
    issued_at = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    auth_service.request_password_reset(db, "+237699000111", sender, now=issued_at)
    code = sender.sent[0][1]
    wrong = "000000" if code != "000000" else "111111"

    with pytest.raises(InvalidOrExpiredCodeException):
        auth_service.reset_password(db, "+237699000111", wrong, "brand-new", now=issued_at + timedelta(minutes=1))

    db.refresh(store_admin)
    assert store_admin.reset_password_code == code
    assert store_admin.check_password("secret123")


def test_non_ascii_code_is_rejected_by_service(db, store_admin):
    issued_at = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    auth_service.request_password_reset(db, "+237699000111", RecordingSender(), now=issued_at)

    with pytest.raises(InvalidOrExpiredCodeException):
        auth_service.verify_reset_code(db, "+237699000111", "١٢٣٤٥٦", now=issued_at + timedelta(minutes=1))


def test_reissue_replaces_code(db, store_admin):
    sender = RecordingSender()
    issued_at = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    auth_service.request_password_reset(db, "+237699000111", sender, now=issued_at)
    auth_service.request_password_reset(db, "+237699000111", sender, now=issued_at + timedelta(minutes=5))
    first, second = sender.sent[0][1], sender.sent[1][1]

    db.refresh(store_admin)
    assert store_admin.reset_password_code == second
    if first != second:
        with pytest.raises(InvalidOrExpiredCodeException):
            auth_service.verify_reset_code(db, "+237699000111", first, now=issued_at + timedelta(minutes=6))
    # The window restarts from the second request
    auth_service.verify_reset_code(db, "+237699000111", second, now=issued_at + timedelta(minutes=14))


def test_reset_for_unknown_number(db):
    with pytest.raises(EntityNotFoundException):
        auth_service.request_password_reset(db, "+10000000000", RecordingSender())


def test_reset_flow_over_api(client, store_admin, sender, db):
    r = client.post("/api/auth/forgot-password", json={"whatsappNumber": "+237699000111"})
    assert r.status_code == 200
    assert r.json() == {"message": "Verification code sent to your WhatsApp"}

    db.refresh(store_admin)
    code = store_admin.reset_password_code
    assert sender.sent == [("+237699000111", code)]

    r = client.post("/api/auth/verify-reset-code", json={"whatsappNumber": "+237699000111", "code": code})
    assert r.status_code == 200
    assert r.json()["userId"] == store_admin.id

    r = client.post(
        "/api/auth/reset-password",
        json={"whatsappNumber": "+237699000111", "code": code, "newPassword": "new-secret"},
    )
    assert r.status_code == 200
    assert r.json() == {"message": "Password reset successfully"}

    assert _login(client, "douala@example.com", "new-secret").status_code == 200
    assert _login(client, "douala@example.com", "secret123").status_code == 401

    # Codes are single use
    r = client.post(
        "/api/auth/reset-password",
        json={"whatsappNumber": "+237699000111", "code": code, "newPassword": "again-secret"},
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid or expired verification code"


def test_forgot_password_unknown_number_is_404(client, sender):
    r = client.post("/api/auth/forgot-password", json={"whatsappNumber": "+10000000000"})
    assert r.status_code == 404
    assert sender.sent == []


@pytest.mark.parametrize("code", ["12ab56", "١٢٣٤٥٦", "１２３４５６", "12345"])
def test_reset_code_format_is_checked(client, store_admin, sender, code):
    client.post("/api/auth/forgot-password", json={"whatsappNumber": "+237699000111"})

    for path, extra in (("/api/auth/verify-reset-code", {}), ("/api/auth/reset-password", {"newPassword": "new-secret"})):
        r = client.post(path, json={"whatsappNumber": "+237699000111", "code": code, **extra})
        assert r.status_code == 400
        assert r.json()["errors"][0]["field"] == "code"


# --- Profile ----------------------------------------------------------------


def test_profile_password_change_requires_current_password(client, customer, auth_headers):
    headers = auth_headers(customer)

    r = client.put("/api/auth/profile", json={"newPassword": "another-one"}, headers=headers)
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "currentPassword"

    r = client.put(
        "/api/auth/profile",
        json={"currentPassword": "not-it", "newPassword": "another-one"},
        headers=headers,
    )
    assert r.status_code == 400

    r = client.put(
        "/api/auth/profile",
        json={"currentPassword": "secret123", "newPassword": "another-one"},
        headers=headers,
    )
    assert r.status_code == 200
    assert _login(client, "someone@example.com", "another-one").status_code == 200


def test_profile_update_keeps_password_hash(client, customer, auth_headers, db):
    before = customer.password_hash
    r = client.put("/api/auth/profile", json={"name": "Someone Else"}, headers=auth_headers(customer))
    assert r.status_code == 200
    assert r.json()["message"] == "Profile updated successfully"
    assert r.json()["user"]["name"] == "Someone Else"

    db.refresh(customer)
    assert customer.password_hash == before


def test_profile_email_must_be_free(client, customer, store_admin, auth_headers):
    r = client.put("/api/auth/profile", json={"email": "douala@example.com"}, headers=auth_headers(customer))
    assert r.status_code == 400
    assert r.json()["message"] == "User already exists"


def test_password_is_stored_hashed(db, customer):
    stored = db.get(User, customer.id)
    assert stored.password_hash != "secret123"
    assert stored.password_hash.startswith("$2")
    with pytest.raises(AttributeError):
        stored.password


# --- Registration and user management --------------------------------------


def test_store_admin_registers_into_own_store(client, store_admin, other_location, auth_headers):
    r = client.post(
        "/api/auth/register",
        json={"email": "clerk@example.com", "password": "clerk-pass", "isAdmin": True, "locationId": other_location.id},
        headers=auth_headers(store_admin),
    )
    assert r.status_code == 201
    assert r.json()["locationId"] == store_admin.location_id
    assert r.json()["isSuperAdmin"] is False


def test_store_admin_cannot_create_super_admin(client, store_admin, auth_headers):
    r = client.post(
        "/api/auth/register",
        json={"email": "boss@example.com", "password": "boss-pass", "isAdmin": True, "isSuperAdmin": True},
        headers=auth_headers(store_admin),
    )
    assert r.status_code == 403


def test_register_duplicate_email(client, super_admin, customer, auth_headers):
    r = client.post(
        "/api/auth/register",
        json={"email": "someone@example.com", "password": "whatever"},
        headers=auth_headers(super_admin),
    )
    assert r.status_code == 400
    assert r.json()["errors"] == [{"field": "email", "message": "Email is already registered"}]


def test_register_requires_admin(client, customer, auth_headers):
    body = {"email": "new@example.com", "password": "whatever"}
    assert client.post("/api/auth/register", json=body).status_code == 401
    assert client.post("/api/auth/register", json=body, headers=auth_headers(customer)).status_code == 403


def test_users_routes_are_super_admin_only(client, store_admin, super_admin, customer, auth_headers):
    assert client.get("/api/auth/users", headers=auth_headers(store_admin)).status_code == 403

    r = client.get("/api/auth/users", headers=auth_headers(super_admin))
    assert r.status_code == 200
    assert {u["email"] for u in r.json()} == {"root@example.com", "douala@example.com", "someone@example.com"}


def test_super_admin_updates_user(client, super_admin, customer, location, auth_headers, db):
    before = customer.password_hash
    r = client.put(
        f"/api/auth/users/{customer.id}",
        json={"isAdmin": True, "locationId": location.id},
        headers=auth_headers(super_admin),
    )
    assert r.status_code == 200
    assert r.json()["isAdmin"] is True
    assert r.json()["locationId"] == location.id

    db.refresh(customer)
    assert customer.password_hash == before


def test_super_admin_cannot_delete_self(client, super_admin, customer, auth_headers):
    headers = auth_headers(super_admin)
    assert client.delete(f"/api/auth/users/{super_admin.id}", headers=headers).status_code == 400

    r = client.delete(f"/api/auth/users/{customer.id}", headers=headers)
    assert r.status_code == 200
    assert r.json() == {"message": "User removed"}
    assert client.delete(f"/api/auth/users/{customer.id}", headers=headers).status_code == 404
