"""
Processed Notification Data Access Object (DAO).

WHAT: Ledger of Xendit callbacks already turned into payments.

WHY: Xendit retries callbacks until it receives a 2xx. The ledger lets a
replayed notification be acknowledged without touching the order again.

HOW: `mark_processed` relies on the unique notification_id column; the
row is written in the same transaction as the payment, so either both
exist or neither does.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from xendit_payments.dao.base import BaseDAO
from xendit_payments.models.processed_notification import ProcessedNotification


class ProcessedNotificationDAO(BaseDAO[ProcessedNotification]):
    """Data Access Object for ProcessedNotification model."""

    def __init__(self, session: AsyncSession):
        super().__init__(ProcessedNotification, session)

    async def is_processed(self, notification_id: str) -> bool:
        """
        Check whether a notification id has already been processed.

        Args:
            notification_id: Xendit invoice id from the callback

        Returns:
            True if a payment was already recorded for it
        """
        result = await self.session.execute(
            select(ProcessedNotification.id).where(
                ProcessedNotification.notification_id == notification_id
            )
        )
        return result.scalar_one_or_none() is not None

    async def mark_processed(
        self,
        notification_id: str,
        order_code: str,
        payment_id: Optional[int] = None,
    ) -> ProcessedNotification:
        """
        Record a notification as processed.

        Raises:
            IntegrityError: If the notification was recorded concurrently
        """
        return await self.create(
            notification_id=notification_id,
            order_code=order_code,
            payment_id=payment_id,
            processed_at=datetime.utcnow(),
        )
