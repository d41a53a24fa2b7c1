"""
Payment Method Data Access Object (DAO).

WHAT: Database operations for the PaymentMethod model.

WHY: Payment methods are configured per channel and resolved on every
callback, so a method enabled or disabled by an administrator takes effect
on the next notification.
"""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from xendit_payments.dao.base import BaseDAO
from xendit_payments.models.payment_method import PaymentMethod


class PaymentMethodDAO(BaseDAO[PaymentMethod]):
    """Data Access Object for PaymentMethod model."""

    def __init__(self, session: AsyncSession):
        super().__init__(PaymentMethod, session)

    async def get_for_channel(
        self,
        channel_id: int,
        enabled_only: bool = True,
    ) -> List[PaymentMethod]:
        """
        List payment methods configured for a channel.

        Args:
            channel_id: Channel ID
            enabled_only: Skip disabled methods

        Returns:
            Payment methods ordered by ID
        """
        query = select(PaymentMethod).where(PaymentMethod.channel_id == channel_id)
        if enabled_only:
            query = query.where(PaymentMethod.enabled.is_(True))
        result = await self.session.execute(query.order_by(PaymentMethod.id))
        return list(result.scalars().all())

    async def get_by_code(self, code: str, channel_id: int) -> Optional[PaymentMethod]:
        result = await self.session.execute(
            select(PaymentMethod).where(
                PaymentMethod.code == code,
                PaymentMethod.channel_id == channel_id,
            )
        )
        return result.scalar_one_or_none()
