"""
Collaborator interfaces used by the webhook reconciler.

WHAT: Structural types for the order store, payment method registry,
tenant context factory and processed-notification ledger.

WHY: The reconciler only orchestrates. Depending on protocols instead of
the SQLAlchemy implementations keeps it testable with plain AsyncMocks
and lets the order store be swapped for a remote one.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from xendit_payments.middleware.request_context import RequestMetadata
from xendit_payments.models.order import Order, OrderState
from xendit_payments.models.payment_method import PaymentMethod
from xendit_payments.services.results import OrderResult
from xendit_payments.services.tenant_context import TenantContext


@runtime_checkable
class OrderStore(Protocol):
    """Authoritative source of orders."""

    async def find_by_code(self, ctx: TenantContext, code: str) -> Optional[Order]:
        ...

    async def transition_state(
        self, ctx: TenantContext, order_id: int, target: OrderState
    ) -> OrderResult:
        ...

    async def add_payment(
        self,
        ctx: TenantContext,
        order_id: int,
        method_code: str,
        metadata: Dict[str, Any],
    ) -> OrderResult:
        ...

    async def get_active_order(self, ctx: TenantContext, customer_id: int) -> Optional[Order]:
        ...


@runtime_checkable
class PaymentMethodRegistry(Protocol):
    """Resolves the payment methods configured for a channel."""

    async def list_configured(self, ctx: TenantContext) -> List[PaymentMethod]:
        ...


@runtime_checkable
class TenantContextProvider(Protocol):
    """Builds a channel-scoped context from a channel token."""

    async def create(
        self,
        channel_token: str,
        request_metadata: Optional[RequestMetadata] = None,
        api_type: str = ...,
    ) -> TenantContext:
        ...


@runtime_checkable
class NotificationLedger(Protocol):
    """Records notification ids that have already produced a payment."""

    async def is_processed(self, notification_id: str) -> bool:
        ...

    async def mark_processed(
        self,
        notification_id: str,
        order_code: str,
        payment_id: Optional[int] = None,
    ) -> Any:
        ...
