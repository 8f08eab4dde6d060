import time

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kaiko.core.settings import settings
from kaiko.db.base import Base
import kaiko.models  # noqa: F401
from kaiko.main import create_app

APP_ID = "clkaikotestapp0000000000"


def _make_ec_keypair_pem():
    from cryptography.hazmat.primitives import serialization
    from cryptography.hazmat.primitives.asymmetric import ec

    private_key = ec.generate_private_key(ec.SECP256R1())
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")
    return private_pem, public_pem


@pytest.fixture()
def private_pem(monkeypatch):
    private_pem, public_pem = _make_ec_keypair_pem()
    monkeypatch.setattr(settings, "PRIVY_APP_ID", APP_ID)
    monkeypatch.setattr(settings, "PRIVY_VERIFICATION_KEY", public_pem)
    return private_pem


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    app = create_app(session_factory=TestingSessionLocal)
    with TestClient(app) as c:
        yield c


def _token(private_pem: str, sub: str, **overrides) -> str:
    claims = {
        "sid": "session-1",
        "sub": sub,
        "aud": APP_ID,
        "iss": "privy.io",
        "iat": int(time.time()),
        "exp": int(time.time()) + 60,
    }
    claims.update(overrides)
    return jwt.encode(claims, private_pem, algorithm="ES256")


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_missing_token_is_401_once_privy_is_configured(client, private_pem):
    r = client.get("/api/v1/users", params={"privyId": "did:privy:kai", "intent": "confirm"})
    assert r.status_code == 401
    assert r.json() == {"error": "Missing Authorization header"}


def test_valid_token_for_same_identity(client, private_pem):
    token = _token(private_pem, "did:privy:kai")

    r = client.get(
        "/api/v1/users",
        params={"privyId": "did:privy:kai", "intent": "confirm"},
        headers=_auth(token),
    )
    assert r.status_code == 200
    assert r.json()["exists"] is False

    created = client.post(
        "/api/v1/users",
        json={"email_address": "kai@kaiko.gg", "username": "kai", "privy_id": "did:privy:kai"},
        headers=_auth(token),
    )
    assert created.status_code == 201


def test_token_for_another_identity_is_403(client, private_pem):
    token = _token(private_pem, "did:privy:someone-else")

    r = client.get(
        "/api/v1/users",
        params={"privyId": "did:privy:kai", "intent": "fetch-hub-data"},
        headers=_auth(token),
    )
    assert r.status_code == 403

    created = client.post(
        "/api/v1/users",
        json={"email_address": "kai@kaiko.gg", "username": "kai", "privy_id": "did:privy:kai"},
        headers=_auth(token),
    )
    assert created.status_code == 403


@pytest.mark.parametrize(
    "overrides",
    [
        {"aud": "some-other-app"},
        {"iss": "evil.example"},
        {"exp": int(time.time()) - 60},
    ],
)
def test_invalid_tokens_are_401(client, private_pem, overrides):
    token = _token(private_pem, "did:privy:kai", **overrides)

    r = client.get(
        "/api/v1/users",
        params={"privyId": "did:privy:kai", "intent": "confirm"},
        headers=_auth(token),
    )
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid token"}


def test_non_bearer_header_is_401(client, private_pem):
    r = client.get(
        "/api/v1/users",
        params={"privyId": "did:privy:kai", "intent": "confirm"},
        headers={"Authorization": "Basic abc"},
    )
    assert r.status_code == 401
