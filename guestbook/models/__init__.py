"""
Models package for the guestbook.
"""
from .base import Base, create_engine_from_url, to_async_url
from .models import Comment

__all__ = [
    "Base",
    "create_engine_from_url",
    "to_async_url",
    "Comment",
]
