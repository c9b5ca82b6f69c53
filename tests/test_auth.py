"""Login, lockout, session re-validation, logout and signup."""

import logging
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from staffpicks.config import get_settings
from staffpicks.domain.models.base import utcnow
from staffpicks.infrastructure.repositories.user_repository import MongoUserRepository

settings = get_settings()
COOKIE = settings.SESSION_COOKIE_NAME


def _login(client, email, password):
    return client.post("/api/auth/login", json={"email": email, "password": password})


# ── Login ─────────────────────────────────────────────────────


def test_login_sets_session_cookie(client, tenant):
    response = _login(client, "alice@acme.test", "Passw0rd!")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["redirectUrl"] == "/dashboard"
    assert body["user"]["role"] == "librarian"
    assert body["user"]["companyName"] == "Acme Books"
    assert body["user"]["storeId"] == str(tenant.main["_id"])

    cookie_header = response.headers["set-cookie"].lower()
    assert f"{COOKIE}=" in cookie_header
    assert "httponly" in cookie_header
    assert "samesite=strict" in cookie_header
    assert "max-age=7200" in cookie_header


def test_login_is_case_insensitive_on_email(client, tenant):
    assert _login(client, "  ALICE@Acme.test", "Passw0rd!").status_code == 200


def test_login_records_last_login(client, db, tenant):
    client.post(
        "/api/auth/login",
        json={"email": "alice@acme.test", "password": "Passw0rd!"},
        headers={"X-Forwarded-For": "198.51.100.7, 10.0.0.1"},
    )

    user = db.users.find_one({"_id": tenant.librarian["_id"]})
    assert user["lastLoginIp"] == "198.51.100.7"
    assert user["lastLoginAt"] is not None


def test_login_requires_email_and_password(client, tenant):
    assert client.post("/api/auth/login", json={"email": "alice@acme.test"}).status_code == 400


def test_unknown_email_gets_generic_error(client, tenant):
    response = _login(client, "nobody@acme.test", "Passw0rd!")

    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid email or password"


def test_wrong_password_reports_attempts_remaining(client, tenant):
    response = _login(client, "alice@acme.test", "wrong")

    assert response.status_code == 401
    assert response.json()["error"]["details"]["attemptsRemaining"] == settings.MAX_LOGIN_ATTEMPTS - 1


def test_account_locks_after_max_failed_attempts(client, db, tenant):
    for _ in range(settings.MAX_LOGIN_ATTEMPTS - 1):
        assert _login(client, "alice@acme.test", "wrong").status_code == 401

    locked = _login(client, "alice@acme.test", "wrong")
    assert locked.status_code == 423
    assert locked.json()["error"]["details"]["minutesRemaining"] == settings.LOCKOUT_DURATION_MINUTES

    # Even the right password is refused while the lock holds
    response = _login(client, "alice@acme.test", "Passw0rd!")
    assert response.status_code == 423
    assert response.json()["error"]["details"]["minutesRemaining"] <= settings.LOCKOUT_DURATION_MINUTES

    user = db.users.find_one({"_id": tenant.librarian["_id"]})
    assert user["failedLoginAttempts"] == settings.MAX_LOGIN_ATTEMPTS
    assert user["lockedUntil"] > utcnow()


def _expire_lock(db, user_id):
    db.users.update_one(
        {"_id": user_id},
        {"$set": {"lockedUntil": utcnow() - timedelta(minutes=1)}},
    )


def _lock(client):
    for _ in range(settings.MAX_LOGIN_ATTEMPTS):
        _login(client, "alice@acme.test", "wrong")


def test_correct_password_after_lock_window_succeeds(client, db, tenant):
    _lock(client)
    _expire_lock(db, tenant.librarian["_id"])

    assert _login(client, "alice@acme.test", "Passw0rd!").status_code == 200

    user = db.users.find_one({"_id": tenant.librarian["_id"]})
    assert user["failedLoginAttempts"] == 0
    assert "lockedUntil" not in user


def test_wrong_password_after_lock_window_starts_fresh_count(client, db, tenant):
    _lock(client)
    _expire_lock(db, tenant.librarian["_id"])

    response = _login(client, "alice@acme.test", "wrong")

    assert response.status_code == 401
    assert response.json()["error"]["details"]["attemptsRemaining"] == settings.MAX_LOGIN_ATTEMPTS - 1


@pytest.mark.parametrize("status", ["inactive", "suspended"])
def test_non_active_user_is_refused(client, db, tenant, status):
    db.users.update_one({"_id": tenant.librarian["_id"]}, {"$set": {"status": status}})

    assert _login(client, "alice@acme.test", "Passw0rd!").status_code == 403


def test_soft_deleted_user_looks_unknown(client, db, tenant):
    db.users.update_one({"_id": tenant.librarian["_id"]}, {"$set": {"deletedAt": utcnow()}})

    response = _login(client, "alice@acme.test", "Passw0rd!")

    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid email or password"


# ── Session ───────────────────────────────────────────────────


def test_me_requires_a_session(client, tenant):
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UnauthorizedException"


def test_me_returns_session_claims(login_as, tenant):
    session_client = login_as("manager@acme.test")

    body = session_client.get("/api/auth/me").json()

    assert body["userId"] == str(tenant.store_admin["_id"])
    assert body["role"] == "storeAdmin"
    assert body["companyId"] == str(tenant.company["_id"])
    assert body["companyName"] == "Acme Books"
    assert body["isLoggedIn"] is True


def test_tampered_cookie_is_rejected(app, tenant):
    session_client = TestClient(app)
    session_client.cookies.set(COOKIE, "not-a-real-token")

    response = session_client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["error"]["details"]["redirectUrl"] == "/login"


@pytest.mark.parametrize(
    "change",
    [
        {"$set": {"status": "suspended"}},
        {"$set": {"status": "inactive"}},
        {"$set": {"deletedAt": datetime(2024, 1, 1)}},
    ],
)
def test_session_is_revalidated_on_every_request(login_as, db, tenant, change):
    session_client = login_as("alice@acme.test")
    assert session_client.get("/api/auth/me").status_code == 200

    db.users.update_one({"_id": tenant.librarian["_id"]}, change)
    response = session_client.get("/api/books")

    assert response.status_code == 401
    assert response.json()["error"]["details"]["redirectUrl"] == "/login"
    assert COOKIE not in session_client.cookies


def test_session_picks_up_role_change(login_as, db, tenant):
    session_client = login_as("bob@acme.test")
    db.users.update_one({"_id": tenant.librarian2["_id"]}, {"$set": {"role": "storeAdmin"}})

    assert session_client.get("/api/auth/me").json()["role"] == "storeAdmin"


@pytest.mark.parametrize("method", ["post", "get"])
def test_logout_clears_session(login_as, tenant, method):
    session_client = login_as("alice@acme.test")

    response = getattr(session_client, method)("/api/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert session_client.get("/api/auth/me").status_code == 401


# ── Signup ────────────────────────────────────────────────────


def _signup_payload(**overrides):
    payload = {
        "companyName": "Page Turners",
        "firstName": "Paula",
        "lastName": "Turner",
        "email": "paula@pageturners.test",
        "password": "Secret123",
        "confirmPassword": "Secret123",
    }
    payload.update(overrides)
    return payload


def test_signup_bootstraps_a_tenant(client, db):
    response = client.post("/api/auth/signup", json=_signup_payload())

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["redirectUrl"] == "/dashboard/settings/onboarding"
    assert body["user"]["role"] == "companyAdmin"
    assert body["user"]["companyName"] == "Page Turners"
    assert body["user"].get("storeId") is None

    company = db.companies.find_one({"slug": "page-turners"})
    assert company["status"] == "trial"
    assert company["plan"] == "starter"
    trial = company["trialEndsAt"] - company["createdAt"]
    assert abs(trial - timedelta(days=settings.TRIAL_DAYS)) < timedelta(minutes=1)

    store = db.stores.find_one({"companyId": company["_id"]})
    assert store["name"] == "Main Store"
    assert store["code"] == "MAIN_STORE"

    user = db.users.find_one({"email": "paula@pageturners.test"})
    assert user["companyId"] == company["_id"]
    assert "storeId" not in user
    assert user["passwordHash"] != "Secret123"

    # The new session works straight away
    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["email"] == "paula@pageturners.test"


def test_signup_uses_store_name_for_code(client, db):
    client.post("/api/auth/signup", json=_signup_payload(storeName="Geneve Balexert"))

    assert db.stores.find_one({"name": "Geneve Balexert"})["code"] == "GENEVE_BALEXERT"


def test_signup_suffixes_taken_company_slug(client, db, tenant):
    response = client.post("/api/auth/signup", json=_signup_payload(companyName="Acme Books"))

    assert response.status_code == 201
    assert db.companies.count_documents({"name": "Acme Books"}) == 2
    assert db.companies.find_one({"slug": "acme-books-1"}) is not None


def test_signup_rejects_duplicate_email(client, tenant):
    response = client.post("/api/auth/signup", json=_signup_payload(email="ALICE@acme.test"))

    assert response.status_code == 409


@pytest.mark.parametrize(
    "overrides",
    [
        {"confirmPassword": "Secret124"},
        {"password": "secret123", "confirmPassword": "secret123"},
        {"password": "Short1", "confirmPassword": "Short1"},
        {"companyName": "  "},
        {"email": "not-an-email"},
    ],
)
def test_signup_validates_input(client, db, overrides):
    response = client.post("/api/auth/signup", json=_signup_payload(**overrides))

    assert response.status_code == 400
    assert db.companies.count_documents({}) == 0


def test_signup_is_rate_limited_per_ip(client):
    headers = {"X-Forwarded-For": "203.0.113.9"}
    for _ in range(settings.SIGNUP_RATE_LIMIT):
        response = client.post("/api/auth/signup", json=_signup_payload(companyName=""), headers=headers)
        assert response.status_code == 400

    blocked = client.post("/api/auth/signup", json=_signup_payload(), headers=headers)
    assert blocked.status_code == 429

    other_ip = client.post("/api/auth/signup", json=_signup_payload(), headers={"X-Forwarded-For": "203.0.113.10"})
    assert other_ip.status_code == 201


def test_signup_rolls_back_when_user_insert_fails(app, db, monkeypatch):
    original_create = MongoUserRepository.create

    def failing_create(self, obj_in):
        raise RuntimeError("insert failed")

    monkeypatch.setattr(MongoUserRepository, "create", failing_create)
    client = TestClient(app, raise_server_exceptions=False)

    response = client.post("/api/auth/signup", json=_signup_payload())

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "InternalServerError"
    assert db.companies.count_documents({}) == 0
    assert db.stores.count_documents({}) == 0

    monkeypatch.setattr(MongoUserRepository, "create", original_create)
    assert client.post("/api/auth/signup", json=_signup_payload()).status_code == 201


def test_access_log_names_the_session_user(tenant, login_as, caplog):
    alice = login_as("alice@acme.test")

    with caplog.at_level(logging.INFO, logger="staffpicks.core.middleware"):
        assert alice.get("/api/auth/me").status_code == 200

    completed = [
        record.msg
        for record in caplog.records
        if isinstance(record.msg, dict) and record.msg.get("event") == "Request completed"
    ]
    assert completed[-1]["path"] == "/api/auth/me"
    assert completed[-1]["user_id"] == str(tenant.librarian["_id"])
