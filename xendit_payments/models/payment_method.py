"""
Payment method model.

WHAT: A payment method configured for a channel, bound to a handler.

WHY: The same handler (e.g. Xendit) can be offered under different codes
and names per channel. Callbacks resolve the method by handler code at
notification time, so configuration changes apply without a restart.
"""

from typing import Optional, TYPE_CHECKING
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped

from xendit_payments.models.base import Base, PrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from xendit_payments.models.channel import Channel


class PaymentMethod(PrimaryKeyMixin, TimestampMixin, Base):
    """
    Configured payment method.

    Attributes:
        code: Code recorded on payments made with this method
        name: Display name
        handler_code: Code of the handler that processes payments
        channel_id: Channel the method is available in
        enabled: Disabled methods cannot record payments
    """

    __tablename__ = "payment_methods"
    __table_args__ = (
        UniqueConstraint("channel_id", "code", name="uq_payment_methods_channel_code"),
    )

    code: Mapped[str] = Column(String(100), nullable=False)
    name: Mapped[Optional[str]] = Column(String(255), nullable=True)
    handler_code: Mapped[str] = Column(String(100), nullable=False, index=True)
    channel_id: Mapped[int] = Column(
        Integer,
        ForeignKey("channels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    enabled: Mapped[bool] = Column(Boolean, nullable=False, default=True)

    channel: Mapped["Channel"] = relationship("Channel", back_populates="payment_methods")

    def __repr__(self) -> str:
        return f"<PaymentMethod(id={self.id}, code={self.code}, handler={self.handler_code})>"
