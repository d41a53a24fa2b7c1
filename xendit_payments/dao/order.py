"""
Order Data Access Object (DAO).

WHAT: Database operations for the Order model.

WHY: Every order query in this service is scoped to a channel. Keeping the
scoping in the DAO means a callback for one channel can never load an
order belonging to another, even when order codes are guessed.

HOW: Extends BaseDAO with channel-scoped lookups by code and by customer.
"""

from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from xendit_payments.dao.base import BaseDAO
from xendit_payments.models.order import Order


class OrderDAO(BaseDAO[Order]):
    """
    Data Access Object for Order model.

    WHAT: Provides channel-scoped queries for orders.

    HOW: Payments and the customer are loaded eagerly by the model's
    relationship configuration, so returned orders are safe to inspect
    outside of the query.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize OrderDAO.

        Args:
            session: Async database session
        """
        super().__init__(Order, session)

    async def get_by_code(self, code: str, channel_id: int) -> Optional[Order]:
        """
        Get an order by its code within a channel.

        WHY: The order code is the correlation key Xendit echoes back as
        external_id on callbacks.

        Args:
            code: Order code
            channel_id: Channel the order must belong to

        Returns:
            Order if found in the channel, None otherwise
        """
        result = await self.session.execute(
            select(Order).where(
                Order.code == code,
                Order.channel_id == channel_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_active_for_customer(
        self,
        customer_id: int,
        channel_id: int,
    ) -> Optional[Order]:
        """
        Get the customer's active order in a channel.

        WHAT: The order the customer is currently building or paying for.

        Returns:
            Most recently created active order, None if there is none
        """
        result = await self.session.execute(
            select(Order)
            .where(
                Order.customer_id == customer_id,
                Order.channel_id == channel_id,
                Order.active.is_(True),
            )
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()
