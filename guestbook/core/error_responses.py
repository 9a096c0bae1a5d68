"""
Standardized error response messages and builders.

Every error leaves the API as a JSON object with an ``error`` key and,
for backend failures, a ``details`` key carrying the underlying message.
The builders below raise ``HTTPException`` with that object as its
``detail``; the application's exception handler renders it verbatim.

Usage:
    from guestbook.core.error_responses import ErrorMessages, raise_bad_request

    if not payload.id:
        raise_bad_request(ErrorMessages.COMMENT_ID_REQUIRED)

    except SQLAlchemyError as e:
        raise_server_error(ErrorMessages.SUBMIT_FAILED, details=str(e))
"""

from typing import Any, Dict, NoReturn, Optional

from fastapi import HTTPException, status


class ErrorMessages:
    """Centralized user-facing error messages."""

    # Not Found (404)
    ENDPOINT_NOT_FOUND = "endpoint not found"

    # Bad Request (400)
    INVALID_REQUEST = "invalid request"
    COMMENT_ID_REQUIRED = "comment id is required"

    # Server Errors (500)
    LIST_FAILED = "failed to fetch comments"
    SUBMIT_FAILED = "failed to submit comment"
    DELETE_FAILED = "failed to delete comment"
    CLEANUP_FAILED = "failed to clean up comments"
    DB_INFO_FAILED = "failed to read database info"
    INTERNAL_ERROR = "internal server error"


def error_body(error: str, details: Optional[Any] = None) -> Dict[str, Any]:
    """Build the JSON body shared by every error response."""
    body: Dict[str, Any] = {"error": error}
    if details is not None:
        body["details"] = details
    return body


def raise_bad_request(error: str, details: Optional[Any] = None) -> NoReturn:
    """Raise a 400 Bad Request exception.

    Use for malformed request bodies and missing required fields.

    Args:
        error: User-facing error message
        details: Optional description of what was wrong

    Raises:
        HTTPException: 400 Bad Request
    """
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error_body(error, details),
    )


def raise_not_found(error: str = ErrorMessages.ENDPOINT_NOT_FOUND) -> NoReturn:
    """Raise a 404 Not Found exception."""
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=error_body(error),
    )


def raise_server_error(error: str, details: Optional[str] = None) -> NoReturn:
    """Raise a 500 Internal Server Error exception.

    Args:
        error: User-facing error message
        details: Underlying error text, when available

    Raises:
        HTTPException: 500 Internal Server Error
    """
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=error_body(error, details),
    )
