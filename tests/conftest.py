# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["RATE_LIMIT_BACKEND"] = "memory"

from traderfm.core.security import create_access_token
from traderfm.core.settings import settings
from traderfm.db.session import Base, configure_engine
from traderfm.db.session import get_db as app_get_session
from traderfm.main import app as fastapi_app
from traderfm.models import Answer, Question, User
from traderfm.services import question_service, user_service
from traderfm.services.rate_limit import MemoryRateLimitBackend, RateLimiter, get_rate_limiter

TEST_DB_URL = "sqlite://"
TEST_CLIENT_IP = "testclient"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = configure_engine(
        create_engine(
            TEST_DB_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    # Services commit for real so that their rollback paths are exercised;
    # every row is wiped afterwards instead of unwinding a savepoint.
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def rate_limiter() -> RateLimiter:
    """Fresh in-memory limiter using the configured windows."""
    return RateLimiter(
        MemoryRateLimitBackend(),
        global_max=settings.rate_limit_global_max,
        global_window_seconds=settings.rate_limit_global_window_seconds,
        question_max=settings.rate_limit_question_max,
        question_window_seconds=settings.rate_limit_question_window_seconds,
    )


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    rate_limiter: RateLimiter,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_rate_limiter, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def test_user_credentials(db_session: Session) -> tuple[User, str]:
    """Register the primary test handle and return it with its secret key."""
    return user_service.register(db_session, "alice")


@pytest.fixture()
def test_user(test_user_credentials: tuple[User, str]) -> User:
    return test_user_credentials[0]


@pytest.fixture()
def other_user(db_session: Session) -> User:
    user, _secret = user_service.register(db_session, "bob")
    return user


@pytest.fixture()
def external_user(db_session: Session) -> User:
    """Create a handle owned by an external identity."""
    user, _created = user_service.external_login(
        db_session,
        user_service.ExternalProfile(
            external_id="ext-1001",
            username="CarolTrades",
            display_name="Carol",
            profile_image_url="https://images.example/carol.png",
        ),
    )
    return user


def _bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.handle)}"}


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return _bearer(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return _bearer(other_user)


@pytest.fixture()
def make_question(db_session: Session) -> Callable[..., Question]:
    """Factory that stores a question for a handle without going through HTTP."""

    def _make(handle: str = "alice", text: str = "What is your best trade ever?") -> Question:
        return question_service.submit_question(db_session, handle, text, "10.0.0.1")

    return _make


@pytest.fixture()
def make_answer(
    db_session: Session,
    make_question: Callable[..., Question],
) -> Callable[..., Answer]:
    """Factory that asks and answers a question for ``owner``."""

    def _make(
        owner: User,
        text: str = "Shorting the top in 2021.",
        question_text: str = "What is your best trade ever?",
    ) -> Answer:
        question = make_question(owner.handle, question_text)
        return question_service.answer_question(db_session, question.id, text, owner)

    return _make
