import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fillblank.core.database import get_db
from fillblank.main import app
from fillblank.models.orm import Base

@pytest.fixture()
def client():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool, future=True)
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)
    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
    engine.dispose()

def _login(client, user_id, roles):
    r = client.post("/v1/auth/mock-login", json={"user_id": user_id, "roles": roles})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['access_token']}"}

@pytest.fixture()
def author(client):
    return _login(client, "author-1", ["author"])

@pytest.fixture()
def student(client):
    return _login(client, "student-1", ["student"])
