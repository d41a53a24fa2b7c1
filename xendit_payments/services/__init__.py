"""
Business logic services package.

WHY: Services contain business logic separated from API routes and data access,
following the three-layer architecture (API → Service → DAO).
"""

from xendit_payments.services.callback_verifier import CallbackVerifier
from xendit_payments.services.order_service import OrderService
from xendit_payments.services.payment_method_registry import DatabasePaymentMethodRegistry
from xendit_payments.services.results import (
    OrderErrorCode,
    OrderFailure,
    OrderResult,
    OrderSuccess,
)
from xendit_payments.services.tenant_context import (
    TenantContext,
    TenantContextFactory,
    channel_token_from_description,
    invoice_description,
)
from xendit_payments.services.webhook_reconciler import (
    ReconciliationOutcome,
    ReconciliationState,
    WebhookReconciler,
)
from xendit_payments.services.xendit_client import XenditClient
from xendit_payments.services.xendit_handler import (
    XENDIT_HANDLER_CODE,
    PaymentHandlerRegistry,
    XenditPaymentMethodHandler,
)
from xendit_payments.services.xendit_service import XenditService

__all__ = [
    "CallbackVerifier",
    "OrderService",
    "DatabasePaymentMethodRegistry",
    "OrderErrorCode",
    "OrderFailure",
    "OrderResult",
    "OrderSuccess",
    "TenantContext",
    "TenantContextFactory",
    "channel_token_from_description",
    "invoice_description",
    "ReconciliationOutcome",
    "ReconciliationState",
    "WebhookReconciler",
    "XenditClient",
    "XENDIT_HANDLER_CODE",
    "PaymentHandlerRegistry",
    "XenditPaymentMethodHandler",
    "XenditService",
]
