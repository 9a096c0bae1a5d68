"""
Health check endpoint.
"""
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from guestbook.api.dependencies import get_comment_store
from guestbook.core.datetime_utils import utc_now
from guestbook.storage import CommentStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(store: CommentStore = Depends(get_comment_store)):
    """
    Health check endpoint.

    Retries schema initialization if it failed at startup, then reports
    the comment count and which storage backend is serving requests.
    """
    try:
        await store.ensure_initialized()
        comment_count = await store.count()
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "error": str(e)},
        )

    body = {
        "status": "ok",
        "timestamp": utc_now().isoformat(),
        "commentsCount": comment_count,
        "storage": store.backend_name,
    }
    if store.database_name:
        body["database"] = store.database_name
    return body
