import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kaiko.db.base import Base
from kaiko.models.user import User
from kaiko.main import create_app


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def client(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    app = create_app(session_factory=TestingSessionLocal)
    with TestClient(app) as c:
        yield c


def _create(client, privy_id="ext_123", username="kai"):
    r = client.post(
        "/api/v1/users",
        json={"email_address": f"{username}@kaiko.gg", "username": username, "privy_id": privy_id},
    )
    assert r.status_code == 201
    return r.json()["user"]


def test_confirm_unknown_user_is_not_an_error(client):
    r = client.get("/api/v1/users", params={"privyId": "nobody", "intent": "confirm"})
    assert r.status_code == 200
    assert r.json() == {"status": "successful", "exists": False, "user": None}


def test_confirm_existing_user(client):
    created = _create(client)

    r = client.get("/api/v1/users", params={"privyId": "ext_123", "intent": "confirm"})
    assert r.status_code == 200
    body = r.json()
    assert body["exists"] is True
    assert body["user"]["id"] == created["id"]


def test_fetch_user_unknown_is_404(client):
    r = client.get("/api/v1/users", params={"privyId": "nobody", "intent": "fetch-user"})
    assert r.status_code == 404
    assert r.json() == {"error": "User not found"}


def test_fetch_user_is_default_intent(client):
    _create(client)

    r = client.get("/api/v1/users", params={"privyId": "ext_123"})
    assert r.status_code == 200
    assert r.json()["status"] == "successful"
    assert r.json()["user"]["username"] == "kai"


def test_snake_case_privy_id_is_accepted(client):
    _create(client)

    r = client.get("/api/v1/users", params={"privy_id": "ext_123", "intent": "fetch-user"})
    assert r.status_code == 200
    assert r.json()["user"]["privy_id"] == "ext_123"


def test_missing_privy_id_is_400(client):
    r = client.get("/api/v1/users", params={"intent": "confirm"})
    assert r.status_code == 400
    assert r.json() == {"error": "Missing privyId"}


def test_unknown_intent_is_400(client):
    r = client.get("/api/v1/users", params={"privyId": "ext_123", "intent": "delete-everything"})
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid intent"}


def test_legacy_fetch_route(client):
    r = client.get("/api/v1/users/fetch", params={"privyId": "ext_123", "intent": "confirm"})
    assert r.status_code == 200
    assert r.json()["exists"] is False


@pytest.mark.parametrize("intent", ["confirm", "fetch-user"])
def test_store_error_is_500_with_generic_message(client, engine, intent):
    User.__table__.drop(engine)

    r = client.get("/api/v1/users", params={"privyId": "ext_123", "intent": intent})
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}
