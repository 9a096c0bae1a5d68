"""
Tests for the in-memory comment store and the API served from it.
"""
import pytest

from guestbook.schemas.comments import CommentCreateRequest
from guestbook.storage import InMemoryCommentStore


def _submission(text: str = "hi") -> CommentCreateRequest:
    return CommentCreateRequest(email="a@b.com", comment=text)


class TestInMemoryCommentStore:
    """Tests for InMemoryCommentStore."""

    @pytest.mark.asyncio
    async def test_append_prepends(self):
        store = InMemoryCommentStore()

        first = await store.append(_submission("first"))
        second = await store.append(_submission("second"))

        listed = await store.list_recent()
        assert [c.id for c in listed] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_ids_are_epoch_millis(self):
        store = InMemoryCommentStore(clock=lambda: 1_700_000_000_000)

        record = await store.append(_submission())

        assert record.id == 1_700_000_000_000

    @pytest.mark.asyncio
    async def test_ids_unique_within_same_millisecond(self):
        """Test that a stalled clock still yields unique, increasing ids."""
        store = InMemoryCommentStore(clock=lambda: 5000)

        ids = [(await store.append(_submission(str(i)))).id for i in range(3)]

        assert ids == [5000, 5001, 5002]

    @pytest.mark.asyncio
    async def test_cap_evicts_oldest(self):
        """Test that after 101 inserts only the 100 newest remain."""
        store = InMemoryCommentStore(max_comments=100)

        records = [await store.append(_submission(f"c{i}")) for i in range(101)]

        listed = await store.list_recent()
        assert len(listed) == 100
        assert await store.count() == 100
        assert records[0].id not in {c.id for c in listed}
        assert [c.id for c in listed] == [r.id for r in reversed(records[1:])]

    @pytest.mark.asyncio
    async def test_list_recent_slices(self):
        store = InMemoryCommentStore()
        records = [await store.append(_submission(f"c{i}")) for i in range(5)]

        page = await store.list_recent(limit=2, offset=1)

        assert [c.id for c in page] == [records[3].id, records[2].id]

    @pytest.mark.asyncio
    async def test_fingerprints_not_kept(self):
        store = InMemoryCommentStore()

        record = await store.append(
            _submission(), ip_hash="0123456789abcdef", user_agent="agent"
        )

        assert record.ip_hash is None
        assert record.user_agent is None

    @pytest.mark.asyncio
    async def test_clear(self):
        store = InMemoryCommentStore()
        await store.append(_submission())

        store.clear()

        assert await store.count() == 0
        assert await store.list_recent() == []

    @pytest.mark.asyncio
    async def test_initialize_is_noop(self):
        store = InMemoryCommentStore()

        assert await store.initialize() is True
        assert await store.ensure_initialized() is True
        assert store.database_name is None


class TestMemoryBackendAPI:
    """Tests for the API when serving from the in-memory store."""

    def test_submit_and_list(self, memory_client, sample_comment):
        created = memory_client.post("/api/comments", json=sample_comment)

        assert created.status_code == 200
        data = created.json()
        assert data["success"] is True
        assert isinstance(data["id"], int)

        comments = memory_client.get("/api/comments").json()
        assert len(comments) == 1
        assert comments[0]["id"] == data["id"]
        assert comments[0]["email"] == "a@b.com"
        assert comments[0]["comment"] == "hi"
        assert comments[0]["color"] == "red"
        assert "ip_hash" not in comments[0]
        assert "user_agent" not in comments[0]

    def test_101_submissions_keep_newest_100(self, memory_client):
        ids = []
        for i in range(101):
            response = memory_client.post(
                "/api/comments", json={"email": "a@b.com", "comment": f"c{i}"}
            )
            ids.append(response.json()["id"])

        comments = memory_client.get("/api/comments").json()

        assert len(comments) == 100
        assert [c["id"] for c in comments] == list(reversed(ids[1:]))

    def test_health_reports_memory_storage(self, memory_client):
        memory_client.post("/api/comments", json={"email": "a@b.com", "comment": "x"})

        response = memory_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["commentsCount"] == 1
        assert data["storage"] == "memory"
        assert "database" not in data

    @pytest.mark.parametrize(
        "method,path",
        [
            ("DELETE", "/api/comments"),
            ("POST", "/api/comments/cleanup"),
            ("GET", "/admin/db-info"),
        ],
    )
    def test_maintenance_endpoints_not_available(self, memory_client, method, path):
        """Test that database-only endpoints are a 404 with the memory store."""
        response = memory_client.request(method, path, json={"id": 1})

        assert response.status_code == 404
        assert response.json() == {"error": "endpoint not found"}
