# tests/conftest.py

import os
import tempfile

# Set before the app is imported: use the in-memory test database,
# a throwaway upload directory, and no real mail relay
os.environ["TESTING"] = "1"
os.environ.setdefault("TEST_DATABASE_URL", "sqlite://")
os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["OWNER_EMAIL"] = "owner@natheme.com"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="natheme-uploads-")
os.environ["EMAIL_USER"] = ""
os.environ["EMAIL_PASSWORD"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

from natheme.db import engine, get_session
from natheme.main import app
from natheme.models import Role, User
from natheme.utils import get_password_hash


OWNER_EMAIL = "owner@natheme.com"
OWNER_PASSWORD = "ownerpass1"
ADMIN_EMAIL = "admin@natheme.com"
ADMIN_PASSWORD = "adminpass1"


@pytest.fixture(name="client")
def client_fixture():
    return TestClient(app)

# Fixture to create the database and tables for testing
@pytest.fixture(name="create_test_database")
def create_test_database_fixture():
    # Override the get_session dependency to use the test database session
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session

    # Setup: create tables in the test DB
    SQLModel.metadata.create_all(engine)
    yield
    # Teardown: drop tables after tests
    SQLModel.metadata.drop_all(engine)

    app.dependency_overrides.pop(get_session, None)


def create_user_in_db(name: str, email: str, password: str, role: Role = Role.CUSTOMER) -> User:
    with Session(engine) as session:
        user = User(name=name, email=email, password=get_password_hash(password), role=role)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

def signin(client: TestClient, email: str, password: str) -> str:
    response = client.post("/api/auth/signin", json={"email": email, "password": password})
    assert response.status_code == 200, response.json()
    return response.json()["token"]

def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(name="owner_token")
def owner_token_fixture(create_test_database, client):
    create_user_in_db("Owner", OWNER_EMAIL, OWNER_PASSWORD, Role.OWNER)
    return signin(client, OWNER_EMAIL, OWNER_PASSWORD)

@pytest.fixture(name="admin_token")
def admin_token_fixture(create_test_database, client):
    create_user_in_db("Admin", ADMIN_EMAIL, ADMIN_PASSWORD, Role.ADMIN)
    return signin(client, ADMIN_EMAIL, ADMIN_PASSWORD)
