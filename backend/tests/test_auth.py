from __future__ import annotations

from uuid import UUID, uuid4

from planwise.core.auth import issue_session_token, read_session_claims
from planwise.db.models.user import User


def test_session_token_round_trip() -> None:
    user_id = uuid4()

    claims = read_session_claims(issue_session_token(user_id, secret="s3cret"), secret="s3cret")

    assert claims is not None
    assert claims["sub"] == str(user_id)
    assert claims["exp"] > claims["iat"]


def test_token_signed_with_other_secret_is_rejected() -> None:
    token = issue_session_token(uuid4(), secret="one")

    assert read_session_claims(token, secret="two") is None


def test_expired_token_is_rejected() -> None:
    token = issue_session_token(uuid4(), ttl_seconds=-10, secret="s3cret")

    assert read_session_claims(token, secret="s3cret") is None


def test_tampered_payload_is_rejected() -> None:
    token = issue_session_token(uuid4(), secret="s3cret")
    other = issue_session_token(uuid4(), secret="s3cret")
    forged = f"{other.split('.')[0]}.{token.split('.')[1]}"

    assert read_session_claims(forged, secret="s3cret") is None
    assert read_session_claims("garbage", secret="s3cret") is None


def test_session_endpoint_creates_user(client, session_factory) -> None:
    user_id = uuid4()

    response = client.post("/auth/session", json={"user_id": str(user_id), "full_name": "Ana"})

    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user_id"] == str(user_id)
    assert read_session_claims(body["access_token"])["sub"] == str(user_id)
    with session_factory() as db:
        assert db.get(User, user_id).full_name == "Ana"


def test_first_request_with_unknown_user_creates_profile(client, session_factory) -> None:
    user_id = uuid4()
    headers = {"Authorization": f"Bearer {issue_session_token(user_id)}"}

    response = client.get("/projects", headers=headers)

    assert response.status_code == 200
    with session_factory() as db:
        assert db.get(User, UUID(str(user_id))) is not None


def test_non_bearer_scheme_is_rejected(client) -> None:
    token = issue_session_token(uuid4())

    response = client.get("/projects", headers={"Authorization": f"Basic {token}"})

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_non_ascii_token_is_rejected() -> None:
    assert read_session_claims("café.sig", secret="s3cret") is None


def test_non_ascii_bearer_header_returns_401(client) -> None:
    # Header values reach the app latin-1 decoded.
    headers = {"Authorization": "Bearer café.sig".encode("latin-1")}

    response = client.post("/plan/generate", json={"goal": "Learn Spanish"}, headers=headers)

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
