"""
Xendit payment API endpoints.

WHAT: The Xendit invoice callback endpoint and the shop endpoint that
creates a Xendit invoice for the customer's active order.

WHY: Xendit reports paid invoices only through the callback, so the
callback is the single place where orders become paid. The shop endpoint
is how a customer obtains the hosted invoice URL to pay at.

HOW: FastAPI routers:
- POST /payments/xendit (no auth, x-callback-token header)
- POST /api/shop/xendit/payments (customer session token)

SECURITY (OWASP):
- A01: Shop requests only reach the authenticated customer's active order
- A02: Callback token verified before the body is parsed
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import PlainTextResponse

from xendit_payments.core.deps import (
    CustomerSession,
    get_current_customer,
    get_order_service,
    get_tenant_context_factory,
    get_webhook_reconciler,
    get_xendit_service,
)
from xendit_payments.middleware.request_context import RequestMetadata, get_request_metadata
from xendit_payments.schemas.xendit import XenditCreateInvoiceResponse
from xendit_payments.services.order_service import OrderService
from xendit_payments.services.tenant_context import API_TYPE_SHOP, TenantContextFactory
from xendit_payments.services.webhook_reconciler import (
    ReconciliationState,
    WebhookReconciler,
)
from xendit_payments.services.xendit_service import XenditService

logger = logging.getLogger(__name__)


webhooks_router = APIRouter(prefix="/payments", tags=["Webhooks"])
shop_router = APIRouter(prefix="/shop/xendit", tags=["Xendit"])


# Retryable and permanent failures get distinct codes so Xendit's retry
# policy can tell them apart
OUTCOME_STATUS_CODES = {
    ReconciliationState.PAYMENT_RECORDED: 200,
    ReconciliationState.ALREADY_PROCESSED: 200,
    ReconciliationState.REJECTED_NO_TOKEN: 400,
    ReconciliationState.REJECTED_BAD_SIGNATURE: 400,
    ReconciliationState.REJECTED_NO_BODY: 400,
    ReconciliationState.ORDER_NOT_FOUND: 404,
    ReconciliationState.TRANSITION_FAILED: 409,
    ReconciliationState.PAYMENT_RECORD_FAILED: 409,
}


def _request_metadata(request: Request) -> Optional[RequestMetadata]:
    return getattr(request.state, "metadata", None) or get_request_metadata()


# ============================================================================
# Callback
# ============================================================================


@webhooks_router.post(
    "/xendit",
    response_class=PlainTextResponse,
    summary="Xendit invoice callback",
    description="Records the payment of a paid Xendit invoice on its order.",
)
async def xendit_webhook(
    request: Request,
    reconciler: WebhookReconciler = Depends(get_webhook_reconciler),
    callback_token: Optional[str] = Header(None, alias="x-callback-token"),
):
    """
    Handle a Xendit invoice callback.

    WHY: Xendit retries until it gets a 2xx. Only a recorded (or already
    recorded) payment returns 200; every failure returns a non-2xx status
    so the callback is retried or surfaces in the Xendit dashboard.

    SECURITY (OWASP A02):
    - The body is only read when a callback token is present, and is
      not parsed until the reconciler has verified that token

    Returns:
        Plain-text "Ok" on success, a short diagnostic otherwise
    """
    metadata = _request_metadata(request)
    payload = await request.body() if callback_token else None
    outcome = await reconciler.reconcile(callback_token, payload, metadata)

    status_code = OUTCOME_STATUS_CODES.get(outcome.state, 500)
    return PlainTextResponse(outcome.message, status_code=status_code)


# ============================================================================
# Shop
# ============================================================================


@shop_router.post(
    "/payments",
    response_model=Optional[XenditCreateInvoiceResponse],
    summary="Create Xendit payment",
    description="Creates a Xendit invoice for the customer's active order.",
)
async def create_xendit_payment(
    request: Request,
    session: CustomerSession = Depends(get_current_customer),
    context_factory: TenantContextFactory = Depends(get_tenant_context_factory),
    order_service: OrderService = Depends(get_order_service),
    xendit_service: XenditService = Depends(get_xendit_service),
) -> Optional[XenditCreateInvoiceResponse]:
    """
    Create a Xendit invoice for the active order.

    WHAT: Looks up the authenticated customer's active order in the
    session's channel and creates a hosted invoice for it.

    Returns:
        The created invoice, or null when the customer has no active order

    Raises:
        ChannelNotFoundError: If the session's channel no longer exists
        InvoiceCreationError: If Xendit rejects or cannot be reached
    """
    ctx = await context_factory.create(
        session.channel_token,
        _request_metadata(request),
        api_type=API_TYPE_SHOP,
    )

    order = await order_service.get_active_order(ctx, session.customer_id)
    if order is None:
        logger.info(
            f"No active order for customer {session.customer_id}",
            extra={"request_id": ctx.request_id},
        )
        return None

    return await xendit_service.create_payment(ctx, order)
