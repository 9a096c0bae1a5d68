"""
Relational comment store backed by the ``comments`` table.

Every operation is a single statement on its own session; no operation spans
a multi-statement transaction.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, func, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from guestbook.core.config import settings
from guestbook.core.datetime_utils import ensure_timezone_aware, utc_now
from guestbook.models import Base, Comment, create_engine_from_url
from guestbook.schemas.comments import CommentCreateRequest, CommentRecord
from guestbook.storage.base import MaintainableCommentStore, StoreInfo

logger = logging.getLogger(__name__)


def _to_record(row: Comment) -> CommentRecord:
    record = CommentRecord.model_validate(row)
    record.timestamp = ensure_timezone_aware(record.timestamp)
    return record


class DatabaseCommentStore(MaintainableCommentStore):
    """
    Comment store using an async SQLAlchemy engine.

    The schema is created by ``initialize`` (run once at application
    startup). A failed initialization is logged and left open so a later
    ``ensure_initialized`` call can retry it; queries issued before the table
    exists fail on their own and surface as server errors.
    """

    backend_name = "database"

    def __init__(
        self,
        engine: Optional[AsyncEngine] = None,
        database_name: Optional[str] = None,
    ):
        self.engine = (
            engine
            if engine is not None
            else create_engine_from_url(settings.DATABASE_URL)
        )
        self._database_name = database_name or settings.DATABASE_NAME or None
        self._sessionmaker = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )
        self._initialized = False

    @property
    def database_name(self) -> Optional[str]:
        return self._database_name or self.engine.url.database

    async def initialize(self) -> bool:
        try:
            async with self.engine.begin() as conn:
                # create_all checks for existing tables and indexes first
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error(f"Comment table initialization failed: {e}")
            return False
        self._initialized = True
        logger.info("Comment table initialized")
        return True

    async def ensure_initialized(self) -> bool:
        if self._initialized:
            return True
        return await self.initialize()

    async def close(self) -> None:
        await self.engine.dispose()

    async def append(
        self,
        submission: CommentCreateRequest,
        ip_hash: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> CommentRecord:
        row = Comment(
            email=submission.email,
            comment=submission.comment,
            color=submission.color,
            created_at=utc_now(),
            ip_hash=ip_hash,
            user_agent=user_agent,
        )
        async with self._sessionmaker() as session:
            session.add(row)
            await session.commit()
        # expire_on_commit=False keeps the inserted values loaded, so the
        # record is built without re-reading a row that may already be gone.
        return _to_record(row)

    async def list_recent(
        self, limit: Optional[int] = None, offset: int = 0
    ) -> List[CommentRecord]:
        stmt = (
            select(Comment)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._sessionmaker() as session:
            result = await session.execute(stmt)
            return [_to_record(row) for row in result.scalars().all()]

    async def get(self, comment_id: int) -> Optional[CommentRecord]:
        async with self._sessionmaker() as session:
            row = await session.get(Comment, comment_id)
            return _to_record(row) if row is not None else None

    async def count(self) -> int:
        async with self._sessionmaker() as session:
            result = await session.execute(select(func.count(Comment.id)))
            return result.scalar_one()

    async def delete(self, comment_id: int) -> int:
        async with self._sessionmaker() as session:
            result = await session.execute(
                delete(Comment).where(Comment.id == comment_id)
            )
            await session.commit()
            return result.rowcount or 0

    async def delete_older_than(self, cutoff: datetime) -> int:
        async with self._sessionmaker() as session:
            result = await session.execute(
                delete(Comment).where(Comment.created_at < cutoff)
            )
            await session.commit()
            return result.rowcount or 0

    async def describe(self) -> StoreInfo:
        async with self.engine.connect() as conn:
            tables = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_table_names()
            )
        async with self._sessionmaker() as session:
            result = await session.execute(
                select(func.count(Comment.id), func.max(Comment.created_at))
            )
            comment_count, last_created = result.one()

        return StoreInfo(
            tables=tables,
            comment_count=comment_count,
            last_comment_time=(
                ensure_timezone_aware(last_created) if last_created else None
            ),
            database_name=self.database_name,
        )
