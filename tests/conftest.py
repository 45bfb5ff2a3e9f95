from pathlib import Path

from dotenv import load_dotenv

env_file = Path(__file__).parent.parent / ".env.test"
load_dotenv(env_file)

import pytest  # noqa: E402
from fakeredis import FakeAsyncRedis  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.auth.models.user import UserRole  # noqa: E402
from app.core import redis as redis_module  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.core.security import create_refresh_token, hash_token  # noqa: E402
from app.db.session import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from tests.utils.factories import (  # noqa: E402
    create_instructor_factory,
    create_user_factory,
)
from tests.utils.helpers import create_user_token  # noqa: E402


@pytest.fixture
def test_engine():
    # One in-memory database per test, shared by every connection through StaticPool
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(test_engine):
    session = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
async def redis_client():
    client = FakeAsyncRedis(decode_responses=True)
    try:
        yield client
    finally:
        await client.flushall()
        await client.aclose()


@pytest.fixture
async def test_app(db_session, redis_client):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    redis_module.redis_client = redis_client

    yield app

    app.dependency_overrides.clear()
    redis_module.redis_client = None


@pytest.fixture
async def test_client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client


@pytest.fixture
def test_user(db_session):
    return create_user_factory(
        db_session, email="student@example.com", password="testpass123", name="김수강"
    )


@pytest.fixture
def test_admin(db_session):
    return create_user_factory(
        db_session,
        email="admin@example.com",
        password="adminpass123",
        name="관리자",
        role=UserRole.ADMIN,
    )


@pytest.fixture
def test_instructor(db_session):
    """Approved instructor profile; the account is reachable as profile.user."""
    return create_instructor_factory(db_session, email="instructor@example.com", name="이강사")


@pytest.fixture
def test_user_token(test_user):
    return create_user_token(test_user)


@pytest.fixture
def test_admin_token(test_admin):
    return create_user_token(test_admin)


@pytest.fixture
def test_instructor_token(test_instructor):
    return create_user_token(test_instructor.user)


@pytest.fixture
async def test_refresh_token(test_user, redis_client):
    token = create_refresh_token(
        {"sub": str(test_user.id), "email": test_user.email, "role": test_user.role.value}
    )

    ttl_seconds = settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60
    await redis_module.store_refresh_token(hash_token(token), str(test_user.id), ttl_seconds)

    return token
