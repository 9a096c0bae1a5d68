"""
CORS middleware for a public, credential-less API.

Starlette's CORSMiddleware only decorates requests that carry an ``Origin``
header and only answers complete preflights. The guestbook is called from
arbitrary static pages, so every response gets the CORS headers and every
``OPTIONS`` request is answered directly with an empty 200.
"""
from typing import Callable, Dict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from guestbook.core.config import settings


def build_cors_headers(
    allow_origin: str = settings.CORS_ALLOW_ORIGIN,
    allow_methods: str = settings.CORS_ALLOW_METHODS,
    allow_headers: str = settings.CORS_ALLOW_HEADERS,
) -> Dict[str, str]:
    """Return the CORS headers attached to every response."""
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": allow_methods,
        "Access-Control-Allow-Headers": allow_headers,
    }


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to attach CORS headers to all responses and answer preflights.
    """

    def __init__(
        self,
        app: ASGIApp,
        allow_origin: str = "*",
        allow_methods: str = "GET, POST, OPTIONS, DELETE",
        allow_headers: str = "Content-Type",
    ):
        """
        Initialize CORS middleware.

        Args:
            app: ASGI application
            allow_origin: Value for Access-Control-Allow-Origin
            allow_methods: Value for Access-Control-Allow-Methods
            allow_headers: Value for Access-Control-Allow-Headers
        """
        super().__init__(app)
        self.cors_headers = build_cors_headers(allow_origin, allow_methods, allow_headers)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Answer preflight requests or add CORS headers to the downstream response.

        Args:
            request: HTTP request
            call_next: Next middleware in chain

        Returns:
            HTTP response with CORS headers
        """
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=self.cors_headers)

        response = await call_next(request)
        response.headers.update(self.cors_headers)
        return response
