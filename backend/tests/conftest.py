import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from settleup.database import Base, get_db
from settleup.main import app

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def auth_headers(client):
    client.post("/api/auth/register", json={
        "username": "max", "email": "max@example.com", "password": "testpass123", "name": "Max"
    })
    res = client.post("/api/auth/login", json={"username": "max", "password": "testpass123"})
    token = res.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def second_user(client):
    res = client.post("/api/auth/register", json={
        "username": "erika", "email": "erika@example.com", "password": "testpass123", "name": "Erika"
    })
    return res.json()["user"]


@pytest.fixture
def second_headers(client, second_user):
    res = client.post("/api/auth/login", json={"username": "erika", "password": "testpass123"})
    return {"Authorization": f"Bearer {res.json()['access_token']}"}
