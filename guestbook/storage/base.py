"""
Comment store interfaces.

Handlers talk to a ``CommentStore`` owned by the application (held on
``app.state.comment_store``) rather than to module-level state, so a store
can be swapped or reset per test.

Stores that can also delete and inspect comments implement
``MaintainableCommentStore``; the endpoints for those operations are only
reachable when the configured store provides them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from guestbook.schemas.comments import CommentCreateRequest, CommentRecord


@dataclass
class StoreInfo:
    """Snapshot of a store's contents for the admin inspection endpoint."""

    tables: List[str] = field(default_factory=list)
    comment_count: int = 0
    last_comment_time: Optional[datetime] = None
    database_name: Optional[str] = None


class CommentStore(ABC):
    """Append and list comments, newest first."""

    #: Human-readable backend name reported by /health
    backend_name: str = "unknown"

    async def initialize(self) -> bool:
        """Prepare the store for use. Returns True when the store is ready."""
        return True

    async def ensure_initialized(self) -> bool:
        """Run ``initialize`` if it has not yet succeeded."""
        return await self.initialize()

    async def close(self) -> None:
        """Release any resources held by the store."""

    @property
    def database_name(self) -> Optional[str]:
        return None

    @abstractmethod
    async def append(
        self,
        submission: CommentCreateRequest,
        ip_hash: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> CommentRecord:
        """Store a new comment and return it with its assigned id and timestamp."""

    @abstractmethod
    async def list_recent(
        self, limit: Optional[int] = None, offset: int = 0
    ) -> List[CommentRecord]:
        """Return up to ``limit`` comments after skipping ``offset``, newest first."""

    @abstractmethod
    async def count(self) -> int:
        """Return the number of stored comments."""


class MaintainableCommentStore(CommentStore):
    """A comment store that also supports deletion and inspection."""

    @abstractmethod
    async def delete(self, comment_id: int) -> int:
        """Delete one comment by id. Returns the number of rows removed (0 or 1)."""

    @abstractmethod
    async def delete_older_than(self, cutoff: datetime) -> int:
        """Delete every comment created before ``cutoff``. Returns rows removed."""

    @abstractmethod
    async def describe(self) -> StoreInfo:
        """Return table names, comment count and the latest creation time."""
