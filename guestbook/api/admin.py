"""
Administrative inspection endpoints.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from guestbook.api.dependencies import get_maintainable_store
from guestbook.core.datetime_utils import utc_now
from guestbook.core.error_responses import ErrorMessages, raise_server_error
from guestbook.schemas.comments import DatabaseInfoResponse, TableInfo
from guestbook.storage import MaintainableCommentStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/db-info", response_model=DatabaseInfoResponse)
async def database_info(
    store: MaintainableCommentStore = Depends(get_maintainable_store),
):
    """
    Report the tables in the database, the comment count and the time of
    the most recent comment.
    """
    try:
        info = await store.describe()
    except SQLAlchemyError as e:
        logger.error(f"Database error reading db info: {e}")
        raise_server_error(ErrorMessages.DB_INFO_FAILED, details=str(e))

    return DatabaseInfoResponse(
        tables=[TableInfo(name=name) for name in info.tables],
        comment_count=info.comment_count,
        last_comment_time=info.last_comment_time,
        database_name=info.database_name,
        timestamp=utc_now(),
    )
