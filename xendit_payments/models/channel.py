"""
Channel model for multi-tenant order scoping.

WHAT: A sales channel (tenant). Every order, payment method and shop
session belongs to exactly one channel.

WHY: Xendit callbacks do not carry our tenant explicitly. The channel token
is encoded in the invoice description when the invoice is created and is
used on callback to scope the order lookup to the right tenant.
"""

from typing import List, TYPE_CHECKING
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship, Mapped

from xendit_payments.models.base import Base, PrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from xendit_payments.models.order import Order
    from xendit_payments.models.payment_method import PaymentMethod


class Channel(PrimaryKeyMixin, TimestampMixin, Base):
    """
    Sales channel (tenant).

    Attributes:
        id: Primary key
        code: Human-readable channel code
        token: Opaque token identifying the channel in requests and callbacks
        currency_code: Default currency of the channel
    """

    __tablename__ = "channels"

    code: Mapped[str] = Column(String(100), unique=True, nullable=False)
    # WHY: '_' separates the token from the order id in invoice descriptions,
    # so tokens must not contain it (enforced by ChannelDAO.create_channel)
    token: Mapped[str] = Column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
        comment="Channel token, encoded in Xendit invoice descriptions",
    )
    currency_code: Mapped[str] = Column(String(3), nullable=False, default="IDR")

    orders: Mapped[List["Order"]] = relationship("Order", back_populates="channel")
    payment_methods: Mapped[List["PaymentMethod"]] = relationship(
        "PaymentMethod", back_populates="channel"
    )

    def __repr__(self) -> str:
        return f"<Channel(id={self.id}, code={self.code})>"
