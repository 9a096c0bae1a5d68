"""
Middleware package for request/response processing.
"""
from .cors import CORSHeadersMiddleware, build_cors_headers
from .request_logging import RequestLoggingMiddleware

__all__ = ["CORSHeadersMiddleware", "RequestLoggingMiddleware", "build_cors_headers"]
