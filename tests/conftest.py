"""
Pytest configuration and shared fixtures for testing.
"""
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool

from guestbook.main import create_application
from guestbook.models import Base, to_async_url
from guestbook.storage import DatabaseCommentStore, InMemoryCommentStore

TEST_DATABASE_NAME = "guestbook_test"


@pytest.fixture(scope="function")
def database_url(tmp_path) -> str:
    """Sync-style URL of a fresh SQLite file for each test."""
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest.fixture(scope="function")
def database_store(database_url) -> DatabaseCommentStore:
    """
    Database-backed store on the per-test SQLite file.

    NullPool keeps connections from outliving the event loop that opened
    them (TestClient and pytest-asyncio each run their own loop).
    """
    engine = create_async_engine(to_async_url(database_url), poolclass=NullPool)
    return DatabaseCommentStore(engine=engine, database_name=TEST_DATABASE_NAME)


@pytest.fixture(scope="function")
def memory_store() -> InMemoryCommentStore:
    return InMemoryCommentStore(max_comments=100)


@pytest.fixture(scope="function")
def client(database_store) -> Generator[TestClient, None, None]:
    """
    Test client for an application serving from the database store.

    Entering the client runs the lifespan, which creates the schema.
    """
    app = create_application(store=database_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def memory_client(memory_store) -> Generator[TestClient, None, None]:
    """Test client for an application serving from the in-memory store."""
    app = create_application(store=memory_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def db_session(database_url, client) -> Generator[Session, None, None]:
    """
    Sync session on the same SQLite file the client writes to, for
    inspecting and seeding rows directly.
    """
    engine = create_engine(database_url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def sample_comment() -> dict:
    return {"email": "a@b.com", "comment": "hi", "color": "red"}
