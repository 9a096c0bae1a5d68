"""
Pydantic schemas for comment endpoints.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from guestbook.core.config import settings


class CommentCreateRequest(BaseModel):
    """Schema for a new guestbook entry."""

    email: str = Field(..., description="Submitter email (free-form)")
    comment: str = Field(..., description="Comment text")
    color: str = Field(
        default=settings.DEFAULT_COMMENT_COLOR,
        description="Display color; defaults to black",
    )

    @field_validator("color", mode="before")
    @classmethod
    def default_missing_color(cls, v: Any) -> Any:
        """Treat an explicit null or empty color like an omitted one."""
        if v is None or v == "":
            return settings.DEFAULT_COMMENT_COLOR
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"email": "a@b.com", "comment": "hi", "color": "red"}
        }
    )


class CommentDeleteRequest(BaseModel):
    """Schema for deleting a single comment by id."""

    id: Optional[int] = Field(None, description="ID of the comment to delete")


class CommentPublic(BaseModel):
    """A stored comment as returned to clients after submission."""

    id: int = Field(..., description="Comment ID assigned by the backend")
    email: str
    comment: str
    color: str
    timestamp: datetime = Field(
        ...,
        validation_alias=AliasChoices("timestamp", "created_at"),
        description="Creation time (UTC)",
    )

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class CommentRecord(CommentPublic):
    """A stored comment including the fingerprint fields of the database backend."""

    ip_hash: Optional[str] = Field(None, description="Truncated SHA-256 of client address")
    user_agent: Optional[str] = Field(None, description="Client user agent (<=255 chars)")


class CommentSubmitResponse(BaseModel):
    """Schema for comment submission response."""

    success: bool = Field(..., description="Whether submission was successful")
    id: int = Field(..., description="ID of the created comment")
    message: str = Field(..., description="Success message")
    comment: Optional[CommentPublic] = Field(None, description="The created comment")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "id": 42,
                "message": "Comment submitted successfully!",
                "comment": {
                    "id": 42,
                    "email": "a@b.com",
                    "comment": "hi",
                    "color": "red",
                    "timestamp": "2026-01-01T12:00:00Z",
                },
            }
        }
    )


class CommentDeleteResponse(BaseModel):
    """Schema for delete response."""

    success: bool = Field(..., description="True when a row was deleted")
    deleted: int = Field(..., description="Number of rows deleted")


class CleanupResponse(BaseModel):
    """Schema for age-based cleanup response."""

    success: bool = True
    deleted: int = Field(..., description="Number of comments deleted")
    message: str


class TableInfo(BaseModel):
    name: str


class DatabaseInfoResponse(BaseModel):
    """Schema for the admin database inspection endpoint."""

    tables: List[TableInfo]
    comment_count: int = Field(..., alias="commentCount")
    last_comment_time: Optional[datetime] = Field(None, alias="lastCommentTime")
    database_name: Optional[str] = Field(None, alias="databaseName")
    timestamp: datetime

    model_config = ConfigDict(populate_by_name=True)
