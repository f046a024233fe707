"""Pytest configuration and fixtures."""

import os

# Settings are read once at import time, so the test environment goes first
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ALLOW_USER_REGISTRATIONS"] = "true"
os.environ["COOKIE_SECURE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

from collections.abc import Callable, Generator  # noqa: E402
from datetime import datetime  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from lingocards import models  # noqa: E402
from lingocards.core import container  # noqa: E402
from lingocards.database import Base, build_engine, get_db  # noqa: E402
from lingocards.main import app  # noqa: E402

TEST_PASSWORD = "correct-horse"

# In-memory SQLite shared through a StaticPool, with foreign keys enforced
test_engine = build_engine("sqlite://")

TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, Any, None]:
    """Create a test client with database session."""

    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _create_user(db_session: Session, email: str, role: str = "user") -> models.User:
    user = models.User(
        email=email,
        hashed_password=container.password_service().hash_password(TEST_PASSWORD),
        role=role,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _bearer(user: models.User) -> dict[str, str]:
    token = container.token_service().create_access_token(user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_password() -> str:
    return TEST_PASSWORD


@pytest.fixture
def test_user(db_session: Session) -> models.User:
    return _create_user(db_session, "learner@example.com")


@pytest.fixture
def other_user(db_session: Session) -> models.User:
    return _create_user(db_session, "someone-else@example.com")


@pytest.fixture
def admin_user(db_session: Session) -> models.User:
    return _create_user(db_session, "admin@example.com", role="admin")


@pytest.fixture
def auth_headers(test_user: models.User) -> dict[str, str]:
    return _bearer(test_user)


@pytest.fixture
def other_headers(other_user: models.User) -> dict[str, str]:
    return _bearer(other_user)


@pytest.fixture
def admin_headers(admin_user: models.User) -> dict[str, str]:
    return _bearer(admin_user)


@pytest.fixture
def make_flashcard(db_session: Session) -> Callable[..., models.Flashcard]:
    """Factory that inserts a flashcard row directly, with any review state."""

    def factory(
        user: models.User,
        english: str = "house",
        spanish: str = "casa",
        difficulty: int = 0,
        review_count: int = 0,
        last_reviewed: datetime | None = None,
        next_review: datetime | None = None,
    ) -> models.Flashcard:
        flashcard = models.Flashcard(
            user_id=user.id,
            english=english,
            spanish=spanish,
            difficulty=difficulty,
            review_count=review_count,
            last_reviewed=last_reviewed,
            next_review=next_review,
        )
        db_session.add(flashcard)
        db_session.commit()
        db_session.refresh(flashcard)
        return flashcard

    return factory
