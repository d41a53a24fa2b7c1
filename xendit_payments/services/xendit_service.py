"""
Xendit payment service.

WHAT: Creates a Xendit invoice for an order, expires invoices, and answers
refund requests.

WHY: Separates what goes on an invoice (amount, correlation ids, payer,
allowed channels) from how it is sent to Xendit.

HOW: Builds the invoice request from the order and XenditOptions, then
delegates to XenditClient.
"""

import logging
from typing import Any, Dict, Optional

from xendit_payments.core.config import XenditOptions
from xendit_payments.core.exceptions import CustomerNotFoundError
from xendit_payments.models.order import Order
from xendit_payments.schemas.xendit import (
    XenditCreateInvoiceRequest,
    XenditCreateInvoiceResponse,
)
from xendit_payments.services.tenant_context import TenantContext, invoice_description
from xendit_payments.services.xendit_client import XenditClient

logger = logging.getLogger(__name__)


class XenditService:
    """
    Service for Xendit invoice payments.

    Attributes:
        options: Xendit configuration
        client: Xendit API client
    """

    def __init__(self, options: XenditOptions, client: Optional[XenditClient] = None):
        self.options = options
        self.client = client or XenditClient(options)

    def build_invoice_request(
        self,
        ctx: TenantContext,
        order: Order,
    ) -> XenditCreateInvoiceRequest:
        """
        Build the invoice request for an order.

        WHY: The order code becomes external_id and the description carries
        the channel token, which is how the callback is routed back to the
        order and its channel.

        Raises:
            CustomerNotFoundError: If the order has no customer email
        """
        customer = order.customer
        if customer is None or not customer.email_address:
            raise CustomerNotFoundError(order_code=order.code)

        return XenditCreateInvoiceRequest(
            amount=order.total_with_tax,
            external_id=order.code,
            currency=self.options.currency,
            payer_email=customer.email_address,
            description=invoice_description(ctx.channel_token, order.id),
            invoice_duration=self.options.invoice_duration,
            payment_methods=list(self.options.payment_methods),
        )

    async def create_payment(
        self,
        ctx: TenantContext,
        order: Order,
    ) -> XenditCreateInvoiceResponse:
        """
        Create a Xendit invoice for the order.

        Returns:
            The created invoice

        Raises:
            CustomerNotFoundError: If the order has no customer
            InvoiceCreationError: If Xendit rejects or cannot be reached
        """
        payload = self.build_invoice_request(ctx, order)
        logger.info(
            f"Creating Xendit invoice for order {order.code}",
            extra={"order_code": order.code, "request_id": ctx.request_id},
        )
        return await self.client.create_invoice(payload)

    async def cancel_payment(self, ctx: TenantContext, invoice_id: str) -> Dict[str, Any]:
        """
        Expire a Xendit invoice so it can no longer be paid.

        Raises:
            InvoiceCancellationError: If Xendit rejects or cannot be reached
        """
        return await self.client.expire_invoice(invoice_id)

    async def create_refund(self, invoice_id: str, amount: int) -> None:
        # Refunds are handled per payment channel in the Xendit dashboard
        logger.info(f"Refund requested for Xendit invoice {invoice_id}; not issued")
        return None
