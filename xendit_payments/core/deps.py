"""
FastAPI dependencies for authentication and payment services.

WHY: Dependencies wire request-scoped collaborators (database session,
authenticated customer, reconciler) into route handlers, so routes stay
thin and tests can override any piece through app.dependency_overrides.
"""

from dataclasses import dataclass
from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from xendit_payments.core.auth import verify_token
from xendit_payments.core.config import XenditOptions, settings
from xendit_payments.core.exceptions import (
    AuthenticationError,
    TokenExpiredError,
    TokenInvalidError,
)
from xendit_payments.dao.processed_notification import ProcessedNotificationDAO
from xendit_payments.db.session import get_db
from xendit_payments.services.callback_verifier import CallbackVerifier
from xendit_payments.services.order_service import OrderService
from xendit_payments.services.payment_method_registry import DatabasePaymentMethodRegistry
from xendit_payments.services.tenant_context import TenantContextFactory
from xendit_payments.services.webhook_reconciler import WebhookReconciler
from xendit_payments.services.xendit_service import XenditService


# HTTP Bearer token security scheme
# Format: "Authorization: Bearer <token>"
security = HTTPBearer()


@dataclass(frozen=True)
class CustomerSession:
    """Authenticated shop session."""

    customer_id: int
    channel_token: str


@lru_cache
def get_xendit_options() -> XenditOptions:
    """
    Xendit options built once from settings.

    WHY: Options are immutable and read-only after startup; caching keeps
    every request on the same validated instance.
    """
    return XenditOptions.from_settings(settings)


async def get_current_customer(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CustomerSession:
    """
    Get the authenticated shop customer from the JWT token.

    Returns:
        CustomerSession with customer id and channel token

    Raises:
        AuthenticationError: If the token is invalid, expired or incomplete
    """
    try:
        payload = verify_token(credentials.credentials)
    except (TokenExpiredError, TokenInvalidError) as e:
        # WHY: Re-raise as AuthenticationError for consistent API responses
        raise AuthenticationError(
            message=str(e),
            status_code=e.status_code,
        )

    customer_id = payload.get("customer_id")
    channel_token = payload.get("channel_token")
    if customer_id is None or not channel_token:
        raise AuthenticationError(message="Token is not a customer session token")

    try:
        customer_id = int(customer_id)
    except (TypeError, ValueError):
        raise AuthenticationError(message="Token is not a customer session token")

    return CustomerSession(customer_id=customer_id, channel_token=channel_token)


def get_order_service(db: AsyncSession = Depends(get_db)) -> OrderService:
    return OrderService(db)


def get_tenant_context_factory(db: AsyncSession = Depends(get_db)) -> TenantContextFactory:
    return TenantContextFactory(db)


def get_xendit_service(
    options: XenditOptions = Depends(get_xendit_options),
) -> XenditService:
    return XenditService(options)


def get_webhook_reconciler(
    db: AsyncSession = Depends(get_db),
    options: XenditOptions = Depends(get_xendit_options),
) -> WebhookReconciler:
    """
    Build the reconciler for one callback request.

    WHY: Every collaborator shares the request's session, so the payment
    and its ledger entry are committed together or not at all.
    """
    return WebhookReconciler(
        verifier=CallbackVerifier(options),
        order_store=OrderService(db),
        payment_methods=DatabasePaymentMethodRegistry(db),
        context_factory=TenantContextFactory(db),
        ledger=ProcessedNotificationDAO(db),
    )
