import pytest

import app.services.auth_service as auth_module
from app.services.firebase_service import firebase_service
from app.utils.security import create_token_pair, verify_refresh_token


@pytest.fixture
def firebase_tokens(monkeypatch):
    """Treat 'fb:<uid>' as a valid Firebase ID token"""

    async def fake_verify(id_token):
        if not id_token.startswith("fb:"):
            raise ValueError("Invalid token")
        uid = id_token[3:]
        return {"uid": uid, "email": f"{uid}@school.edu", "name": "Google User"}

    monkeypatch.setattr(auth_module, "verify_id_token", fake_verify)


@pytest.fixture
def auth_accounts(monkeypatch):
    created = []

    async def fake_create(email, password, display_name=None):
        created.append(email)
        return f"auth_{len(created)}"

    monkeypatch.setattr(firebase_service, "create_auth_user", fake_create)
    return created


def test_verify_token_existing_user(client, seeded, firebase_tokens):
    r = client.post("/api/v1/auth/verify-token", json={"idToken": "fb:member_1"})
    assert r.status_code == 200
    data = r.json()
    assert data["user"]["uid"] == "member_1"
    assert data["user"]["role"] == "member"
    assert data["user"]["fullName"] == "Jane Cruz"
    assert verify_refresh_token(data["tokens"]["refresh_token"])["sub"] == "member_1"


def test_first_google_sign_in_creates_member(client, seeded, firebase_tokens):
    r = client.post("/api/v1/auth/verify-token", json={"idToken": "fb:newcomer"})
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "member"
    stored = seeded.store["Users/newcomer"]
    assert stored["role"] == "member"
    assert stored["email"] == "newcomer@school.edu"


def test_invalid_firebase_token(client, seeded, firebase_tokens):
    r = client.post("/api/v1/auth/verify-token", json={"idToken": "garbage"})
    assert r.status_code == 401


def test_internal_access_token_resolves_user(client, seeded, firebase_tokens):
    tokens = create_token_pair(user_id="officer_1", email="cs@school.edu", role="organization")
    r = client.get(
        "/api/v1/auth/me",
        headers={"Authorization": f"Bearer {tokens['access_token']}"},
    )
    assert r.status_code == 200
    assert r.json()["organizationId"] == "org_1"

    r = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


def test_refresh_token(client, seeded):
    tokens = create_token_pair(user_id="member_1", email="jane@school.edu", role="member")
    r = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert r.status_code == 200
    assert r.json()["token_type"] == "bearer"

    r = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert r.status_code == 401


MEMBER_FORM = {
    "email": "ken@school.edu",
    "password": "secret1",
    "firstName": "Ken",
    "lastName": "Reyes",
    "course": "BSCS",
    "yearLevel": "2",
    "contactNumber": "09171234567",
}


def test_register_member(client, seeded, auth_accounts):
    r = client.post("/api/v1/auth/register/member", json=MEMBER_FORM)
    assert r.status_code == 201
    body = r.json()
    assert body["uid"] == "auth_1"
    assert body["role"] == "member"

    user = seeded.store["Users/auth_1"]
    assert user["fullName"] == "Ken Reyes"
    assert user["likedEvents"] == []
    assert seeded.store[f"members/{body['memberId']}"]["email"] == "ken@school.edu"


def test_register_member_duplicate_email(client, seeded, auth_accounts):
    r = client.post("/api/v1/auth/register/member", json={**MEMBER_FORM, "email": "jane@school.edu"})
    assert r.status_code == 400
    assert auth_accounts == []


def test_register_member_short_password(client, seeded, auth_accounts):
    r = client.post("/api/v1/auth/register/member", json={**MEMBER_FORM, "password": "123"})
    assert r.status_code == 422


def test_register_organization_starts_pending(client, seeded, auth_accounts):
    r = client.post("/api/v1/auth/register/organization", json={
        "name": "Chess Club", "email": "chess@school.edu", "password": "secret1",
        "tags": ["Hobby"]})
    assert r.status_code == 201
    body = r.json()
    assert body["role"] == "organization"

    org = seeded.store[f"Organizations/{body['organizationId']}"]
    assert org["status"] == "pending"
    assert org["officers"] == ["auth_1"]
    assert seeded.store["Users/auth_1"]["organizationId"] == body["organizationId"]


def test_register_organization_duplicate_name(client, seeded, auth_accounts):
    r = client.post("/api/v1/auth/register/organization", json={
        "name": "Computer Society", "email": "other@school.edu", "password": "secret1"})
    assert r.status_code == 400
    assert auth_accounts == []


def test_register_organization_email_taken_in_firebase_auth(client, seeded, monkeypatch):
    async def taken(email, password, display_name=None):
        raise ValueError("Email already exists")

    monkeypatch.setattr(firebase_service, "create_auth_user", taken)
    r = client.post("/api/v1/auth/register/organization", json={
        "name": "Chess Club", "email": "chess@school.edu", "password": "secret1"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Email already exists"
    assert list(seeded.collection("Organizations")) == ["org_1"]


def test_profile_update_mirrors_member_profile(client, login, seeded):
    login("member_1")
    r = client.put("/api/v1/users/me", json={"fullName": "Jane C. Cruz", "yearLevel": "4"})
    assert r.status_code == 200
    assert r.json()["fullName"] == "Jane C. Cruz"
    assert seeded.store["Users/member_1"]["yearLevel"] == "4"
    assert seeded.store["members/m_1"]["fullName"] == "Jane C. Cruz"
    assert seeded.store["members/m_1"]["email"] == "jane@school.edu"
