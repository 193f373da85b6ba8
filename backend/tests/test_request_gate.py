"""
Request gate tests: the real require_identity dependency with the Firebase
verifier stubbed out.
"""
from __future__ import annotations

import pytest

from volunteer_api.auth import firebase
from volunteer_api.models.post import Post

from conftest import ORGANIZER

POST = {
    "organizerEmail": ORGANIZER,
    "deadline": "2030-01-10T00:00:00Z",
    "volunteersNeeded": 3,
    "title": "Beach cleanup",
}


@pytest.fixture()
def verified_as(monkeypatch):
    """Make the verifier accept any token as the given email."""

    def _verified_as(email: str | None):
        claims = {"sub": "uid-1", "email": email} if email else {"sub": "uid-1"}
        monkeypatch.setattr(firebase, "verify_firebase_token", lambda token: claims)

    return _verified_as


@pytest.fixture()
def verifier_raises(monkeypatch):
    def _verifier_raises(exc: Exception):
        def _raise(token):
            raise exc

        monkeypatch.setattr(firebase, "verify_firebase_token", _raise)

    return _verifier_raises


def test_missing_header_is_401_and_writes_nothing(anon_client, db_session, verifier_raises):
    verifier_raises(AssertionError("verifier must not be called"))

    res = anon_client.post("/posts", json=POST)

    assert res.status_code == 401
    assert res.json()["error"] == "UNAUTHENTICATED"
    assert res.headers.get("www-authenticate") == "Bearer"
    assert db_session.query(Post).count() == 0


def test_non_bearer_scheme_is_401(anon_client):
    res = anon_client.get("/my-posts", params={"email": ORGANIZER}, headers={"Authorization": "Basic abc"})
    assert res.status_code == 401


def test_bearer_without_token_is_401(anon_client):
    res = anon_client.get("/my-requests", params={"email": ORGANIZER}, headers={"Authorization": "Bearer "})
    assert res.status_code == 401


def test_rejected_token_is_403_invalid_credential(anon_client, db_session, verifier_raises):
    verifier_raises(firebase.FirebaseInvalidTokenError("Signature verification failed"))

    res = anon_client.post("/posts", json=POST, headers={"Authorization": "Bearer forged"})

    assert res.status_code == 403
    assert res.json() == {"error": "INVALID_CREDENTIAL", "message": "Invalid token"}
    assert db_session.query(Post).count() == 0


def test_expired_token_is_403(anon_client, verifier_raises):
    verifier_raises(firebase.FirebaseTokenExpiredError("Token has expired"))

    res = anon_client.delete("/requests/whatever", headers={"Authorization": "Bearer old"})

    assert res.status_code == 403
    assert res.json()["error"] == "INVALID_CREDENTIAL"
    assert res.json()["message"] == "Token has expired"


def test_issuer_unreachable_is_500(anon_client, verifier_raises):
    verifier_raises(firebase.FirebaseUnavailableError("Failed to fetch JWKS: timeout"))

    res = anon_client.post("/posts", json=POST, headers={"Authorization": "Bearer t"})

    assert res.status_code == 500
    assert res.json()["error"] == "INTERNAL_ERROR"


def test_token_without_email_is_403(anon_client, verified_as):
    verified_as(None)

    res = anon_client.get("/my-posts", params={"email": ORGANIZER}, headers={"Authorization": "Bearer t"})

    assert res.status_code == 403
    assert res.json()["error"] == "INVALID_CREDENTIAL"


def test_verified_token_reaches_the_ledger(anon_client, db_session, verified_as):
    verified_as(ORGANIZER)

    res = anon_client.post("/posts", json=POST, headers={"Authorization": "Bearer good"})

    assert res.status_code == 200
    assert db_session.query(Post).count() == 1


def test_gate_does_not_check_payload_ownership(anon_client, db_session, verified_as):
    # The gate lets the call through; the ledger's ownership check rejects it.
    verified_as("someone-else@example.com")

    res = anon_client.post("/posts", json=POST, headers={"Authorization": "Bearer good"})

    assert res.status_code == 403
    assert res.json()["error"] == "FORBIDDEN"
    assert db_session.query(Post).count() == 0


def test_public_routes_need_no_token(anon_client, verifier_raises):
    verifier_raises(AssertionError("verifier must not be called"))

    assert anon_client.get("/posts").status_code == 200
    assert anon_client.get("/volunteer-posts").status_code == 200
    assert anon_client.get("/").status_code == 200
    assert anon_client.get("/health").json() == {"status": "ok"}
