"""
Comment storage backends.
"""
from typing import Optional

from guestbook.core.config import Settings, settings as default_settings
from guestbook.models import create_engine_from_url

from .base import CommentStore, MaintainableCommentStore, StoreInfo
from .database import DatabaseCommentStore
from .memory import InMemoryCommentStore


def create_comment_store(config: Optional[Settings] = None) -> CommentStore:
    """
    Build the store selected by ``STORAGE_BACKEND``.

    Args:
        config: Settings to read; defaults to the process settings

    Returns:
        An InMemoryCommentStore or a DatabaseCommentStore
    """
    config = config or default_settings
    if config.STORAGE_BACKEND == "memory":
        return InMemoryCommentStore(max_comments=config.MEMORY_MAX_COMMENTS)
    return DatabaseCommentStore(
        engine=create_engine_from_url(config.DATABASE_URL),
        database_name=config.DATABASE_NAME or None,
    )


__all__ = [
    "CommentStore",
    "MaintainableCommentStore",
    "StoreInfo",
    "DatabaseCommentStore",
    "InMemoryCommentStore",
    "create_comment_store",
]
