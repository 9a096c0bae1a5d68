"""
Guestbook comment endpoints: list, submit, delete and age-based cleanup.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from guestbook.api.dependencies import get_comment_store, get_maintainable_store
from guestbook.core.config import settings
from guestbook.core.datetime_utils import days_ago
from guestbook.core.error_responses import (
    ErrorMessages,
    raise_bad_request,
    raise_server_error,
)
from guestbook.core.ip_extraction import get_client_ip, get_user_agent, hash_client_ip
from guestbook.schemas.comments import (
    CleanupResponse,
    CommentCreateRequest,
    CommentDeleteRequest,
    CommentDeleteResponse,
    CommentPublic,
    CommentRecord,
    CommentSubmitResponse,
)
from guestbook.storage import CommentStore, MaintainableCommentStore

logger = logging.getLogger(__name__)

router = APIRouter()

SUBMIT_SUCCESS_MESSAGE = "Comment submitted successfully!"

# Largest integer a signed 64-bit database column or LIMIT/OFFSET accepts
MAX_DB_INT = 2**63 - 1


def _email_domain(email: str) -> str:
    """Return the domain part of an email for logging without PII."""
    return email.split("@")[-1] if "@" in email else "unknown"


def _query_int(raw: Optional[str], default: int) -> int:
    """
    Read an integer query parameter leniently.

    Missing or non-integer values give ``default``; values outside the
    signed 64-bit range are clamped to it.
    """
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return max(-MAX_DB_INT, min(value, MAX_DB_INT))


@router.get(
    "",
    response_model=List[CommentRecord],
    response_model_exclude_none=True,
)
async def list_comments(
    limit: Optional[str] = Query(
        None,
        description=f"Maximum number of comments (default {settings.DEFAULT_PAGE_LIMIT})",
    ),
    offset: Optional[str] = Query(
        None, description="Number of newest comments to skip (default 0)"
    ),
    store: CommentStore = Depends(get_comment_store),
):
    """
    List comments, newest first.

    A missing, non-integer or non-positive ``limit`` falls back to the
    default page size. A missing, non-integer or negative ``offset`` is
    treated as 0.
    """
    page_limit = _query_int(limit, settings.DEFAULT_PAGE_LIMIT)
    if page_limit <= 0:
        page_limit = settings.DEFAULT_PAGE_LIMIT
    page_offset = max(_query_int(offset, 0), 0)

    try:
        return await store.list_recent(limit=page_limit, offset=page_offset)
    except SQLAlchemyError as e:
        logger.error(f"Database error while listing comments: {e}")
        raise_server_error(ErrorMessages.LIST_FAILED, details=str(e))


@router.post(
    "",
    response_model=CommentSubmitResponse,
    openapi_extra={
        "requestBody": {
            "content": {
                "application/json": {"schema": CommentCreateRequest.model_json_schema()}
            },
            "required": True,
        }
    },
)
async def submit_comment(
    request: Request,
    store: CommentStore = Depends(get_comment_store),
):
    """
    Submit a new guestbook comment.

    The body is parsed as JSON whatever its Content-Type, so pages can post
    as ``text/plain`` and skip the CORS preflight.

    The client address is stored only as a truncated hash, and the
    user agent is cut to its maximum stored length.

    Returns:
        The assigned id and the created comment
    """
    try:
        submission = CommentCreateRequest.model_validate_json(await request.body())
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))

    ip_hash = hash_client_ip(get_client_ip(request))
    user_agent = get_user_agent(request)

    try:
        record = await store.append(
            submission, ip_hash=ip_hash, user_agent=user_agent
        )
    except SQLAlchemyError as e:
        logger.error(f"Database error during comment submission: {e}")
        raise_server_error(ErrorMessages.SUBMIT_FAILED, details=str(e))

    logger.info(
        f"Comment submitted: id={record.id}, "
        f"domain={_email_domain(submission.email)}, storage={store.backend_name}"
    )

    return CommentSubmitResponse(
        success=True,
        id=record.id,
        message=SUBMIT_SUCCESS_MESSAGE,
        comment=CommentPublic.model_validate(record, from_attributes=True),
    )


@router.delete("", response_model=CommentDeleteResponse)
async def delete_comment(
    payload: Optional[CommentDeleteRequest] = None,
    store: MaintainableCommentStore = Depends(get_maintainable_store),
):
    """
    Delete a single comment by id.

    Deleting an id that does not exist is not an error; the response
    reports ``success: false`` and ``deleted: 0``.
    """
    if payload is None or not payload.id:
        raise_bad_request(ErrorMessages.COMMENT_ID_REQUIRED)

    # No stored id lies outside the 64-bit range
    if abs(payload.id) > MAX_DB_INT:
        return CommentDeleteResponse(success=False, deleted=0)

    try:
        deleted = await store.delete(payload.id)
    except SQLAlchemyError as e:
        logger.error(f"Database error deleting comment {payload.id}: {e}")
        raise_server_error(ErrorMessages.DELETE_FAILED, details=str(e))

    logger.info(f"Delete comment: id={payload.id}, deleted={deleted}")
    return CommentDeleteResponse(success=deleted > 0, deleted=deleted)


@router.post("/cleanup", response_model=CleanupResponse)
async def cleanup_comments(
    days: Optional[str] = Query(
        None,
        description="Delete comments created more than this many days ago "
        f"(default {settings.CLEANUP_DEFAULT_DAYS})",
    ),
    store: MaintainableCommentStore = Depends(get_maintainable_store),
):
    """
    Delete every comment older than ``days`` days.

    A missing or non-integer ``days`` uses the default, a negative one is
    treated as 0, and ``days=0`` removes everything created before the
    request.
    """
    age_days = max(_query_int(days, settings.CLEANUP_DEFAULT_DAYS), 0)
    cutoff = days_ago(age_days)

    try:
        deleted = await store.delete_older_than(cutoff)
    except SQLAlchemyError as e:
        logger.error(f"Database error during comment cleanup: {e}")
        raise_server_error(ErrorMessages.CLEANUP_FAILED, details=str(e))

    logger.info(f"Cleanup removed {deleted} comments older than {cutoff.isoformat()}")
    noun = "comment" if deleted == 1 else "comments"
    return CleanupResponse(
        success=True,
        deleted=deleted,
        message=f"Removed {deleted} {noun} older than {age_days} days.",
    )
