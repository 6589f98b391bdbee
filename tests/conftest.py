import os

# Configure before anything from placement_portal is imported: settings are cached
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ALLOW_ADMIN_SIGNUP"] = "true"
os.environ["SQL_ECHO"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret"

from datetime import datetime, timedelta, timezone

import mongomock
import pytest
from fastapi.testclient import TestClient

from placement_portal.db import mongodb
from placement_portal.db.postgres import engine
from placement_portal.db.tables import drop_tables, init_tables
from placement_portal.main import app
from placement_portal.services.reference_service import seed_reference_data

PASSWORD = "secret-pass-1"


@pytest.fixture(autouse=True)
def test_db():
    # Fresh tables and a fresh in-memory Mongo for every test
    init_tables(engine)
    seed_reference_data()
    mongodb._client = mongomock.MongoClient()
    mongodb._db = mongodb._client["placement_portal_test"]
    yield
    drop_tables(engine)
    mongodb._client = None
    mongodb._db = None


@pytest.fixture
def client():
    return TestClient(app)


def register(client, role, name=None, email=None, password=PASSWORD, username=None):
    name = name or f"{role.title()} User"
    email = email or f"{name.lower().replace(' ', '.')}@example.edu"
    payload = {"name": name, "email": email, "password": password, "role": role}
    if username:
        payload["username"] = username
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def login(client, username, password=PASSWORD):
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


def signup(client, role, **kwargs):
    """Register and log in; returns (user, headers)."""
    user = register(client, role, **kwargs)
    return user, login(client, user["email"], kwargs.get("password", PASSWORD))


def posting_payload(**overrides):
    payload = {
        "title": "Backend Engineer",
        "description": "Build APIs",
        "type": "full-time",
        "deadline": (datetime.now(timezone.utc) + timedelta(days=30)).isoformat(),
        "status": "Open",
        "eligibility": {"minGpa": 3.0, "gradYear": [2025, 2026]},
        "requiresVerification": False,
        "requiredSkills": [1, 2],
        "company": "Acme",
        "location": "Remote",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def recruiter(client):
    return signup(client, "recruiter", name="Rita Recruiter")


@pytest.fixture
def student(client):
    user, headers = signup(client, "student", name="Sam Student")
    response = client.put(
        f"/api/users/{user['id']}/student-profile",
        json={"gpa": 3.5, "gradYear": 2025, "departmentId": 1, "program": "BSc"},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()["data"], headers


@pytest.fixture
def faculty(client):
    return signup(client, "faculty", name="Fay Faculty")


@pytest.fixture
def admin(client):
    return signup(client, "admin", name="Ada Admin")


@pytest.fixture
def posting(client, recruiter):
    _, headers = recruiter
    response = client.post("/api/postings", json=posting_payload(), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]
