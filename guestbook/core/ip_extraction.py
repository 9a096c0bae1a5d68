"""
Client address extraction and fingerprinting.

The guestbook never stores a raw client address. Submissions keep only a
truncated SHA-256 digest of it (the "IP hash") so repeated posts from one
address can be correlated without retaining the address itself.

Only the header configured in ``CLIENT_IP_HEADER`` is trusted. It is set by
the edge proxy in front of the service (Cloudflare's ``CF-Connecting-IP`` by
default). X-Forwarded-For and X-Real-IP are ignored because clients can
inject arbitrary values into them.
"""

import hashlib
from typing import Optional

from fastapi import Request

from guestbook.core.config import settings

UNKNOWN = "unknown"


def get_client_ip(request: Request, trusted_header: Optional[str] = None) -> str:
    """
    Extract the client address from a request.

    Priority:
    1. The trusted proxy header (first value if comma-separated)
    2. The direct connection address (local development)
    3. ``"unknown"``

    Args:
        request: FastAPI request object
        trusted_header: Header to trust; defaults to settings.CLIENT_IP_HEADER

    Returns:
        Client address as string, or "unknown" if unavailable
    """
    header_name = trusted_header or settings.CLIENT_IP_HEADER
    proxied_ip = request.headers.get(header_name) if header_name else None
    if proxied_ip:
        first = proxied_ip.split(",")[0].strip()
        if first:
            return first

    if request.client and request.client.host:
        return request.client.host

    return UNKNOWN


def hash_client_ip(ip: str, length: Optional[int] = None) -> str:
    """
    Return the first ``length`` hex characters of the SHA-256 of ``ip``.

    Args:
        ip: Client address (any string, including "unknown")
        length: Number of hex characters to keep; defaults to settings.IP_HASH_LENGTH

    Returns:
        Lowercase hex digest prefix
    """
    keep = length if length is not None else settings.IP_HASH_LENGTH
    return hashlib.sha256(ip.encode("utf-8")).hexdigest()[:keep]


def get_user_agent(request: Request, max_length: Optional[int] = None) -> str:
    """Return the request's User-Agent truncated to ``max_length`` characters."""
    limit = max_length if max_length is not None else settings.USER_AGENT_MAX_LENGTH
    return (request.headers.get("User-Agent") or UNKNOWN)[:limit]
