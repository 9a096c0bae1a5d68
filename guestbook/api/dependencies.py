"""
Shared FastAPI dependencies for resolving the application's comment store.
"""
from fastapi import Request

from guestbook.core.error_responses import raise_not_found
from guestbook.storage import CommentStore, MaintainableCommentStore


def get_comment_store(request: Request) -> CommentStore:
    """Return the store attached to the application at startup."""
    return request.app.state.comment_store


def get_maintainable_store(request: Request) -> MaintainableCommentStore:
    """
    Return the store if it supports deletion and inspection.

    Stores without those capabilities (the in-memory store) do not expose the
    corresponding endpoints at all, so callers get the standard 404.
    """
    store = get_comment_store(request)
    if not isinstance(store, MaintainableCommentStore):
        raise_not_found()
    return store
