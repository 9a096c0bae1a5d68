"""
Database models for the guestbook.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, Integer, String, Text

from .base import Base


class Comment(Base):
    """A guestbook entry. Rows are never updated, only inserted and deleted."""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(Text, nullable=False)
    comment = Column(Text, nullable=False)
    color = Column(Text, default="black", server_default="black")
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    # Truncated SHA-256 of the client address; the raw address is never stored
    ip_hash = Column(String(64), nullable=True)
    user_agent = Column(String(255), nullable=True)

    __table_args__ = (Index("idx_comments_email", "email"),)


# Newest-first listing and age-based cleanup both scan created_at
Index("idx_comments_created", Comment.created_at.desc())
