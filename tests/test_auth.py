"""
Tests for signup and signin.

This module covers the auth service against an in-memory database and the
`/signup` and `/signin` endpoints end to end.
"""

import uuid
from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import weather_backend.models  # noqa: F401
from weather_backend.config import Settings, get_settings
from weather_backend.core.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    PersistenceError,
)
from weather_backend.crud.user import user as user_crud
from weather_backend.database import Base, async_session
from weather_backend.dependencies.auth import get_auth_service
from weather_backend.main import app
from weather_backend.schemas.auth import SigninRequest, SignupRequest
from weather_backend.services.auth import AuthService
from weather_backend.utils.security import (
    create_access_token,
    get_password_hash,
    verify_password,
    verify_token,
)


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:10]}@example.com"


@pytest.fixture
async def db():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def settings():
    return Settings(SECRET_KEY="unit-test-secret", BCRYPT_ROUNDS=4)


@pytest.fixture
def auth_service(settings):
    return AuthService(settings)


# Security helpers

def test_default_bcrypt_cost_is_ten():
    assert Settings.model_fields["BCRYPT_ROUNDS"].default == 10
    assert get_password_hash("secret").startswith("$2b$10$")


def test_password_hash_is_salted():
    first = get_password_hash("same-password", rounds=4)
    second = get_password_hash("same-password", rounds=4)

    assert first != second
    assert verify_password("same-password", first)
    assert verify_password("same-password", second)
    assert not verify_password("other-password", first)


def test_verify_password_rejects_malformed_hash():
    assert verify_password("whatever", "not-a-bcrypt-hash") is False


def test_token_round_trip(settings):
    token = create_access_token({"sub": "42"}, settings)
    payload = verify_token(token, settings)

    assert payload["sub"] == "42"
    assert payload["exp"] - payload["iat"] == 60 * 60


def test_expired_token_is_rejected(settings):
    token = create_access_token({"sub": "42"}, settings, expires_delta=timedelta(seconds=-5))
    assert verify_token(token, settings) is None


def test_token_signed_with_other_secret_is_rejected(settings):
    token = create_access_token({"sub": "42"}, Settings(SECRET_KEY="another-secret"))
    assert verify_token(token, settings) is None


# Auth service

async def test_signup_stores_hashed_password(db, auth_service):
    user = await auth_service.signup(
        db, SignupRequest(username="alice", email="alice@example.com", password="wonderland")
    )

    assert user.id is not None
    assert user.username == "alice"
    assert user.hashed_password != "wonderland"
    assert verify_password("wonderland", user.hashed_password)


async def test_signup_duplicate_email(db, auth_service):
    data = SignupRequest(username="bob", email="bob@example.com", password="builder")
    await auth_service.signup(db, data)

    with pytest.raises(DuplicateEmailError) as exc_info:
        await auth_service.signup(
            db, SignupRequest(username="bobby", email="bob@example.com", password="other")
        )

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Email already exists"
    assert await user_crud.count_by_email(db, email="bob@example.com") == 1


async def test_signup_distinct_emails(db, auth_service):
    await auth_service.signup(db, SignupRequest(username="c1", email="c1@example.com", password="pw1"))
    await auth_service.signup(db, SignupRequest(username="c2", email="c2@example.com", password="pw2"))

    assert await user_crud.count(db) == 2


async def test_signin_returns_token_for_user(db, auth_service, settings):
    user = await auth_service.signup(
        db, SignupRequest(username="dana", email="dana@example.com", password="s3cret")
    )

    token = await auth_service.signin(db, SigninRequest(email="dana@example.com", password="s3cret"))

    payload = verify_token(token, settings)
    assert payload["sub"] == str(user.id)


async def test_signin_failures_are_indistinguishable(db, auth_service):
    await auth_service.signup(db, SignupRequest(username="eve", email="eve@example.com", password="right"))

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        await auth_service.signin(db, SigninRequest(email="eve@example.com", password="wrong"))
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        await auth_service.signin(db, SigninRequest(email="nobody@example.com", password="right"))

    assert wrong_password.value.to_dict() == unknown_email.value.to_dict()
    assert wrong_password.value.status_code == 401


async def test_signin_database_failure(db, auth_service, monkeypatch):
    async def broken_lookup(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is down"))

    monkeypatch.setattr(user_crud, "get_by_email", broken_lookup)

    with pytest.raises(PersistenceError) as exc_info:
        await auth_service.signin(db, SigninRequest(email="x@example.com", password="pw"))

    assert exc_info.value.message == "Error signing in"
    assert "database is down" in exc_info.value.error


async def test_signup_database_failure(db, auth_service, monkeypatch):
    async def broken_lookup(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(user_crud, "get_by_email", broken_lookup)

    with pytest.raises(PersistenceError) as exc_info:
        await auth_service.signup(db, SignupRequest(username="f", email="f@example.com", password="pw"))

    assert exc_info.value.message == "Error signing up"
    assert "disk I/O error" in exc_info.value.error


# Endpoints

async def _count_users(email: str) -> int:
    async with async_session() as session:
        return await user_crud.count_by_email(session, email=email)


def test_signup_endpoint(client):
    response = client.post(
        "/signup",
        json={"username": "newuser", "email": unique_email("signup"), "password": "securepassword123"},
    )
    assert response.status_code == 201
    assert response.json() == {"message": "User registered successfully"}
    assert "token" not in response.json()


def test_signup_endpoint_duplicate_email(client):
    email = unique_email("duplicate")
    first = client.post("/signup", json={"username": "one", "email": email, "password": "password123"})
    second = client.post("/signup", json={"username": "two", "email": email, "password": "differentpass456"})

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json() == {"message": "Email already exists"}
    assert client.portal.call(_count_users, email) == 1

    # First password still works; the rejected one was never stored
    assert client.post("/signin", json={"email": email, "password": "password123"}).status_code == 200
    assert client.post("/signin", json={"email": email, "password": "differentpass456"}).status_code == 401


def test_signup_endpoint_two_distinct_emails(client):
    for prefix in ("first", "second"):
        response = client.post(
            "/signup", json={"username": prefix, "email": unique_email(prefix), "password": "pw123456"}
        )
        assert response.status_code == 201


def test_signup_endpoint_invalid_email(client):
    response = client.post(
        "/signup", json={"username": "bad", "email": "notanemail", "password": "password123"}
    )
    assert response.status_code == 400
    assert "email" in response.json()["message"]


def test_signup_endpoint_missing_fields(client):
    response = client.post("/signup", json={"email": unique_email()})
    assert response.status_code == 400
    assert "message" in response.json()


def test_signin_endpoint_success(client):
    email = unique_email("login")
    client.post("/signup", json={"username": "login", "email": email, "password": "testpass123"})

    response = client.post("/signin", json={"email": email, "password": "testpass123"})

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Login successful"
    payload = verify_token(data["token"], get_settings())
    assert payload is not None
    assert payload["sub"].isdigit()
    assert payload["exp"] - payload["iat"] == 3600


def test_signin_endpoint_uniform_failure(client):
    email = unique_email("uniform")
    client.post("/signup", json={"username": "uniform", "email": email, "password": "correct-horse"})

    wrong_password = client.post("/signin", json={"email": email, "password": "battery-staple"})
    unknown_email = client.post(
        "/signin", json={"email": unique_email("ghost"), "password": "correct-horse"}
    )

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"message": "Invalid email or password"}


def test_signup_endpoint_persistence_error(client):
    class FailingAuthService:
        async def signup(self, db, data):
            raise PersistenceError("Error signing up", "connection refused")

    app.dependency_overrides[get_auth_service] = lambda: FailingAuthService()

    response = client.post(
        "/signup", json={"username": "x", "email": unique_email(), "password": "pw123456"}
    )

    assert response.status_code == 500
    assert response.json() == {"message": "Error signing up", "error": "connection refused"}


def test_signup_endpoint_rate_limited(client, monkeypatch):
    from weather_backend.routers.auth import limiter as auth_limiter

    monkeypatch.setattr(auth_limiter, "enabled", True)
    auth_limiter.reset()
    try:
        statuses = []
        for index in range(4):
            response = client.post(
                "/signup",
                json={"username": f"burst{index}", "email": unique_email("burst"), "password": "pw123456"},
            )
            statuses.append(response.status_code)
    finally:
        auth_limiter.reset()

    assert statuses == [201, 201, 201, 429]
    body = response.json()
    assert body["message"] == "Rate limit exceeded"
    assert "3 per 1 minute" in body["error"]


async def test_signin_unknown_email_still_checks_a_hash(db, auth_service, monkeypatch):
    checked = []

    def recording_verify(plain_password, hashed_password):
        checked.append(hashed_password)
        return verify_password(plain_password, hashed_password)

    monkeypatch.setattr("weather_backend.services.auth.verify_password", recording_verify)

    with pytest.raises(InvalidCredentialsError):
        await auth_service.signin(db, SigninRequest(email="nobody@example.com", password="guess"))

    assert len(checked) == 1
    assert checked[0].startswith("$2b$04$")
