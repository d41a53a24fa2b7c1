"""
Request metadata middleware.

WHAT: Middleware that extracts request metadata (IP address, user agent,
request ID) and makes it available throughout the request lifecycle.

WHY: Payment callbacks must be traceable. Every log line written while
reconciling a callback carries the request ID, and the tenant context built
for the order lookup records where the callback came from.

HOW: Stores metadata on Starlette's request state and in a ContextVar for
async-safe access from services that never see the request object.
"""

import uuid
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Optional, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


REQUEST_ID_HEADER = "X-Request-ID"


@dataclass(frozen=True)
class RequestMetadata:
    """
    Container for request-scoped metadata.

    Fields:
    - request_id: Unique identifier for the request (for log correlation)
    - ip_address: Client's real IP (considering proxies)
    - user_agent: Client's identifier
    - path: Request path
    - method: HTTP method
    """

    request_id: str
    ip_address: str
    user_agent: Optional[str]
    path: str
    method: str


_request_metadata: ContextVar[Optional[RequestMetadata]] = ContextVar(
    "request_metadata", default=None
)


def get_request_metadata() -> Optional[RequestMetadata]:
    """
    Get the metadata of the current request.

    Returns:
        RequestMetadata if within a request, None otherwise
    """
    return _request_metadata.get()


def get_client_ip(request: Request) -> str:
    """
    Extract the real client IP address from a request.

    HOW: Checks headers in order of trust:
    1. X-Real-IP (set by some proxies like nginx)
    2. X-Forwarded-For (comma-separated list, first is original client)
    3. request.client.host (direct connection IP)

    Security Note:
        These headers can be spoofed by clients if not behind a trusted proxy.
        The value is only used for logging, never for authorization.
    """
    x_real_ip = request.headers.get("X-Real-IP")
    if x_real_ip:
        return x_real_ip.strip()

    x_forwarded_for = request.headers.get("X-Forwarded-For")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()

    if request.client and request.client.host:
        return request.client.host

    return "unknown"


def build_request_metadata(request: Request) -> RequestMetadata:
    """
    Build metadata for a request.

    WHY: An upstream X-Request-ID is kept so a callback can be traced
    across the proxy and this service; otherwise a new UUID4 is issued.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    return RequestMetadata(
        request_id=request_id,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("User-Agent"),
        path=request.url.path,
        method=request.method,
    )


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that captures and stores request metadata.

    HOW: Stores metadata in both:
    - request.state.metadata (for access from request handlers)
    - ContextVar (for access from services without request object)
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        metadata = build_request_metadata(request)
        request.state.metadata = metadata
        token = _request_metadata.set(metadata)

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = metadata.request_id
            return response
        finally:
            _request_metadata.reset(token)
