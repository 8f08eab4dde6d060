from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kaiko.main import create_app


def test_health():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    app = create_app(session_factory=sessionmaker(bind=engine))
    with TestClient(app) as c:
        r = c.get("/api/v1/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
