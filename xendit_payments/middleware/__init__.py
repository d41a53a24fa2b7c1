"""
Middleware package.

WHY: Middleware provides cross-cutting concerns that apply to all requests.
"""

from xendit_payments.middleware.request_context import (
    RequestContextMiddleware,
    RequestMetadata,
    build_request_metadata,
    get_client_ip,
    get_request_metadata,
)

__all__ = [
    "RequestContextMiddleware",
    "RequestMetadata",
    "build_request_metadata",
    "get_client_ip",
    "get_request_metadata",
]
