"""
In-process comment store.

Comments live in a bounded deque, newest at the left. Nothing survives a
restart. There is no locking; concurrent appends may interleave.
"""

import logging
import time
from collections import deque
from typing import Callable, Deque, List, Optional

from guestbook.core.config import settings
from guestbook.core.datetime_utils import utc_now
from guestbook.schemas.comments import CommentCreateRequest, CommentRecord
from guestbook.storage.base import CommentStore

logger = logging.getLogger(__name__)


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class InMemoryCommentStore(CommentStore):
    """
    Ephemeral comment store capped at ``max_comments`` entries.

    Ids are the epoch milliseconds at insert time. When two comments land in
    the same millisecond the later one gets ``previous id + 1`` so ids stay
    unique and increasing.
    """

    backend_name = "memory"

    def __init__(
        self,
        max_comments: Optional[int] = None,
        clock: Callable[[], int] = _epoch_millis,
    ):
        self.max_comments = max_comments or settings.MEMORY_MAX_COMMENTS
        self._clock = clock
        self._comments: Deque[CommentRecord] = deque(maxlen=self.max_comments)
        self._last_id = 0

    def _next_id(self) -> int:
        self._last_id = max(self._clock(), self._last_id + 1)
        return self._last_id

    async def append(
        self,
        submission: CommentCreateRequest,
        ip_hash: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> CommentRecord:
        # Client fingerprints are only kept by the database store
        record = CommentRecord(
            id=self._next_id(),
            email=submission.email,
            comment=submission.comment,
            color=submission.color,
            timestamp=utc_now(),
        )
        evicting = len(self._comments) == self.max_comments
        # maxlen drops the oldest entry from the right
        self._comments.appendleft(record)
        if evicting:
            logger.debug(f"Comment cap of {self.max_comments} reached, evicted oldest")
        return record

    async def list_recent(
        self, limit: Optional[int] = None, offset: int = 0
    ) -> List[CommentRecord]:
        comments = list(self._comments)
        end = None if limit is None else offset + limit
        return comments[offset:end]

    async def count(self) -> int:
        return len(self._comments)

    def clear(self) -> None:
        """Drop every comment and reset id assignment."""
        self._comments.clear()
        self._last_id = 0
