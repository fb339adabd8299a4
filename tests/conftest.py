import os

# Must be set before the app (and its settings) are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("CORS_ORIGIN", None)
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

import pytest
from fastapi.testclient import TestClient

from app.auth import auth_rate_limiter
from app.database import SessionLocal, engine
from app.main import app
from app.models.database import Base, User, UserRole
from app.services.claude_client import get_claude_client


class StubClaudeClient:
    """Stands in for the Claude gateway and records every call."""

    def __init__(self, reply="Generated legal text.", configured=True, error=None):
        self.reply = reply
        self.configured = configured
        self.error = error
        self.calls = []

    @property
    def is_configured(self):
        return self.configured

    async def complete(self, system_prompt, user_prompt, *, deterministic=False, max_output_tokens):
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "deterministic": deterministic,
            "max_output_tokens": max_output_tokens,
        })
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture(autouse=True)
def fresh_state():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    auth_rate_limiter.clear()
    app.dependency_overrides.clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_client():
    return lambda: TestClient(app)


@pytest.fixture
def stub_claude():
    stub = StubClaudeClient()
    app.dependency_overrides[get_claude_client] = lambda: stub
    return stub


def register(client, email="lawyer@example.com", password="secret123", first_name="Layla", last_name=None):
    body = {"email": email, "password": password, "firstName": first_name}
    if last_name is not None:
        body["lastName"] = last_name
    return client.post("/api/auth/register", json=body)


def promote_to_admin(email):
    session = SessionLocal()
    try:
        user = session.query(User).filter(User.email == email.lower()).one()
        user.role = UserRole.ADMIN
        session.commit()
    finally:
        session.close()


@pytest.fixture
def user_client(client):
    response = register(client)
    assert response.status_code == 201
    return client


@pytest.fixture
def admin_client(make_client):
    admin = make_client()
    assert register(admin, email="admin@example.com", password="adminpass1", first_name="Amal").status_code == 201
    promote_to_admin("admin@example.com")
    return admin
