"""
Payment method registry backed by the database.

WHAT: Lists the payment methods configured for a channel and finds the one
bound to a given handler.

WHY: Resolved on every callback, never cached, so a method configured after
startup is picked up by the next notification.
"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from xendit_payments.dao.payment_method import PaymentMethodDAO
from xendit_payments.models.payment_method import PaymentMethod
from xendit_payments.services.tenant_context import TenantContext


class DatabasePaymentMethodRegistry:
    """PaymentMethodRegistry reading PaymentMethod rows for the channel."""

    def __init__(self, session: AsyncSession):
        self.payment_method_dao = PaymentMethodDAO(session)

    async def list_configured(self, ctx: TenantContext) -> List[PaymentMethod]:
        return await self.payment_method_dao.get_for_channel(ctx.channel_id)


async def find_method_for_handler(
    registry,
    ctx: TenantContext,
    handler_code: str,
) -> Optional[PaymentMethod]:
    """
    Find the first configured payment method whose handler is `handler_code`.

    Args:
        registry: Any PaymentMethodRegistry
        ctx: Tenant context
        handler_code: Handler code to match

    Returns:
        Matching payment method, None if the channel has none
    """
    for method in await registry.list_configured(ctx):
        if method.handler_code == handler_code:
            return method
    return None
