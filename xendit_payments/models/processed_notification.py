"""
Processed notification model for idempotent callback handling.

WHAT: One row per Xendit invoice callback that has been turned into a
payment.

WHY: Xendit retries callbacks it considers undelivered. The unique
notification_id makes a replayed callback detectable before the order is
touched, so it is acknowledged without recording a second payment.

HOW: Only identifiers are stored. The callback payload itself lives on the
Payment as metadata, never here.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped

from xendit_payments.models.base import Base, PrimaryKeyMixin


class ProcessedNotification(PrimaryKeyMixin, Base):
    """
    Ledger entry for a processed callback.

    Attributes:
        notification_id: Xendit invoice id from the callback (unique)
        order_code: Order the payment was recorded against
        payment_id: Payment created from the callback
        processed_at: When the payment was recorded
    """

    __tablename__ = "processed_notifications"

    notification_id: Mapped[str] = Column(String(255), unique=True, nullable=False, index=True)
    order_code: Mapped[str] = Column(String(50), nullable=False)
    payment_id: Mapped[Optional[int]] = Column(
        Integer,
        ForeignKey("payments.id", ondelete="SET NULL"),
        nullable=True,
    )
    processed_at: Mapped[datetime] = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return (
            f"<ProcessedNotification(notification_id={self.notification_id}, "
            f"order_code={self.order_code})>"
        )
