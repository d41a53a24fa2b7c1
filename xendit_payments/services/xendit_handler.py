"""
Xendit payment method handler.

WHAT: Turns a settled Xendit invoice into a payment when the order store
records it, and answers settle/refund requests for Xendit payments.

WHY: By the time a payment is added, Xendit has already collected the money
(the callback only arrives for paid invoices). The handler therefore
reports every new payment as Settled and uses the Xendit invoice id as
the transaction id, which makes a replayed invoice detectable.

HOW: Handlers are looked up by code through PaymentHandlerRegistry. A
payment method row names its handler by code.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, TYPE_CHECKING

from xendit_payments.models.payment import Payment, PaymentState

if TYPE_CHECKING:
    from xendit_payments.models.order import Order
    from xendit_payments.services.tenant_context import TenantContext

logger = logging.getLogger(__name__)

XENDIT_HANDLER_CODE = "xendit"


@dataclass(frozen=True)
class CreatePaymentResult:
    amount: int
    state: PaymentState
    transaction_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None


@dataclass(frozen=True)
class SettlePaymentResult:
    success: bool
    error_message: Optional[str] = None


@dataclass(frozen=True)
class CreateRefundResult:
    state: PaymentState
    transaction_id: Optional[str] = None


class XenditPaymentMethodHandler:
    """
    Payment method handler for Xendit invoices.

    Attributes:
        code: Handler code referenced by PaymentMethod.handler_code
        description: Human-readable description
    """

    code = XENDIT_HANDLER_CODE
    description = "Xendit payments"

    async def create_payment(
        self,
        ctx: "TenantContext",
        order: "Order",
        amount: int,
        metadata: Dict[str, Any],
    ) -> CreatePaymentResult:
        """
        Create a payment from a Xendit callback payload.

        Args:
            ctx: Tenant context
            order: Order being paid
            amount: Amount to record
            metadata: Full callback payload

        Returns:
            Settled payment result carrying the Xendit invoice id
        """
        transaction_id = metadata.get("xenditPaymentId") or metadata.get("id")
        return CreatePaymentResult(
            amount=amount,
            state=PaymentState.SETTLED,
            transaction_id=str(transaction_id) if transaction_id is not None else None,
            metadata=metadata,
        )

    async def settle_payment(self) -> SettlePaymentResult:
        # Xendit payments are created settled
        return SettlePaymentResult(success=True)

    async def create_refund(self, payment: Payment) -> CreateRefundResult:
        """
        Acknowledge a refund for a Xendit payment.

        WHY: Xendit refunds are handled per payment channel in the Xendit
        dashboard. The refund is reported settled so the order can proceed;
        no call is made to Xendit.
        """
        logger.info(
            f"Refund acknowledged for Xendit payment {payment.transaction_id}",
            extra={"payment_id": payment.id},
        )
        return CreateRefundResult(
            state=PaymentState.SETTLED,
            transaction_id=payment.transaction_id,
        )


class PaymentHandlerRegistry:
    """Maps handler codes to payment method handlers."""

    def __init__(self, *handlers: Any):
        self._handlers: Dict[str, Any] = {}
        for handler in handlers:
            self.register(handler)

    def register(self, handler: Any) -> None:
        self._handlers[handler.code] = handler

    def get(self, code: str) -> Optional[Any]:
        return self._handlers.get(code)

    def __contains__(self, code: str) -> bool:
        return code in self._handlers


def default_handler_registry() -> PaymentHandlerRegistry:
    """Registry with the handlers this service ships with."""
    return PaymentHandlerRegistry(XenditPaymentMethodHandler())
