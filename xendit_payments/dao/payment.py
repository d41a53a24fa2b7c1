"""Payment Data Access Object (DAO)."""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from xendit_payments.dao.base import BaseDAO
from xendit_payments.models.payment import Payment


class PaymentDAO(BaseDAO[Payment]):
    """
    Data Access Object for Payment model.

    WHY: The duplicate check by (method, transaction_id) lets the order
    service reject a replayed Xendit invoice as a business outcome before
    the database unique constraint turns it into an IntegrityError.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Payment, session)

    async def get_by_transaction_id(
        self,
        method: str,
        transaction_id: str,
    ) -> Optional[Payment]:
        """
        Get a payment by payment method code and provider transaction id.

        Args:
            method: Payment method code
            transaction_id: Provider transaction reference

        Returns:
            Payment if one was already recorded, None otherwise
        """
        result = await self.session.execute(
            select(Payment).where(
                Payment.method == method,
                Payment.transaction_id == transaction_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_for_order(self, order_id: int) -> List[Payment]:
        result = await self.session.execute(
            select(Payment).where(Payment.order_id == order_id).order_by(Payment.id)
        )
        return list(result.scalars().all())
