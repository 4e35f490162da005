"""
pytest Fixtures for Inkwell Tests

This file contains shared fixtures used across all test files.

FIXTURE SCOPES:
- function (default): New instance per test function
- session: Single instance for entire test session

For database tests, every test gets its own in-memory SQLite engine with
freshly created tables. Services commit, so rolling back an outer
transaction would not isolate tests; a new engine per test does.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import inkwell.models  # noqa: F401 - registers all tables
from inkwell.database import Base, get_db
from inkwell.main import app
from inkwell.models import Author, BlogPost
from inkwell.services.authors import create_author, issue_token
from inkwell.services.content import BLOG_POSTS, create_content

# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture
def engine():
    """
    Create a SQLite in-memory database engine with all tables.

    StaticPool keeps the single connection alive for the whole test.
    Without it, the in-memory database would disappear between connections.
    Foreign keys are switched on by the connect hook in inkwell.database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Create a database session bound to the test engine."""
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency (used by the GraphQL context getter)
    to use our test session.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def alice(db_session: Session) -> Author:
    """Create a sample author (password: secret123)."""
    return create_author(db_session, name="Alice", username="alice", password="secret123")


@pytest.fixture
def bob(db_session: Session) -> Author:
    """Create a second author for ownership scenarios (password: hunter22)."""
    return create_author(db_session, name="Bob", username="bob", password="hunter22")


@pytest.fixture
def alice_token(alice: Author) -> str:
    return issue_token(alice)


@pytest.fixture
def bob_token(bob: Author) -> str:
    return issue_token(bob)


@pytest.fixture
def published_post(db_session: Session, alice: Author) -> BlogPost:
    """A published blog post by alice."""
    return create_content(
        db_session,
        BLOG_POSTS,
        author_id=alice.id,
        title="Hello",
        content="World one",
        is_published=True,
    )


@pytest.fixture
def unpublished_post(db_session: Session, alice: Author) -> BlogPost:
    """An unpublished blog post by alice."""
    return create_content(
        db_session,
        BLOG_POSTS,
        author_id=alice.id,
        title="Secret plans",
        content="Not ready yet",
        is_published=False,
    )
