"""
Tests for settings validation, store selection and error tracking setup.
"""
import pytest
from pydantic import ValidationError

from guestbook.core import error_tracking
from guestbook.core.config import Settings
from guestbook.models import to_async_url
from guestbook.storage import (
    DatabaseCommentStore,
    InMemoryCommentStore,
    create_comment_store,
)


class TestSettingsValidation:
    """Tests for the Settings model validator."""

    def test_defaults(self):
        config = Settings(_env_file=None)

        assert config.MEMORY_MAX_COMMENTS == 100
        assert config.DEFAULT_PAGE_LIMIT == 100
        assert config.CLEANUP_DEFAULT_DAYS == 30
        assert config.IP_HASH_LENGTH == 16
        assert config.USER_AGENT_MAX_LENGTH == 255
        assert config.CLIENT_IP_HEADER == "CF-Connecting-IP"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"MEMORY_MAX_COMMENTS": 0},
            {"DEFAULT_PAGE_LIMIT": -1},
            {"IP_HASH_LENGTH": 0},
            {"IP_HASH_LENGTH": 65},
            {"STORAGE_BACKEND": "redis"},
            {"SENTRY_TRACES_SAMPLE_RATE": 1.5},
        ],
    )
    def test_invalid_values_rejected(self, overrides):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **overrides)


class TestToAsyncUrl:
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("sqlite:///./guestbook.db", "sqlite+aiosqlite:///./guestbook.db"),
            (
                "postgresql://user:pw@db:5432/guestbook",
                "postgresql+asyncpg://user:pw@db:5432/guestbook",
            ),
            (
                "postgresql+psycopg2://user:pw@db/guestbook",
                "postgresql+asyncpg://user:pw@db/guestbook",
            ),
            ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
        ],
    )
    def test_maps_sync_prefixes(self, url, expected):
        assert to_async_url(url) == expected

    def test_unknown_prefix_rejected(self):
        with pytest.raises(ValueError, match="No async driver mapping"):
            to_async_url("mysql://user@host/db")


class TestCreateCommentStore:
    """Tests for backend selection."""

    def test_memory_backend(self):
        config = Settings(_env_file=None, STORAGE_BACKEND="memory", MEMORY_MAX_COMMENTS=5)

        store = create_comment_store(config)

        assert isinstance(store, InMemoryCommentStore)
        assert store.max_comments == 5

    @pytest.mark.asyncio
    async def test_database_backend(self, tmp_path):
        config = Settings(
            _env_file=None,
            STORAGE_BACKEND="database",
            DATABASE_URL=f"sqlite:///{tmp_path / 'factory.db'}",
        )

        store = create_comment_store(config)
        try:
            assert isinstance(store, DatabaseCommentStore)
            assert store.database_name.endswith("factory.db")
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_database_name_override(self, tmp_path):
        config = Settings(
            _env_file=None,
            STORAGE_BACKEND="database",
            DATABASE_URL=f"sqlite:///{tmp_path / 'factory.db'}",
            DATABASE_NAME="guestbook-prod",
        )

        store = create_comment_store(config)
        try:
            assert store.database_name == "guestbook-prod"
        finally:
            await store.close()


class TestErrorTracking:
    def test_disabled_without_dsn(self):
        config = Settings(_env_file=None, SENTRY_DSN="")

        assert error_tracking.init_error_tracking(config) is False

    def test_capture_is_noop_when_disabled(self, monkeypatch):
        monkeypatch.setattr(error_tracking, "_initialized", False)

        assert error_tracking.capture_error(RuntimeError("boom")) is None
