"""
Payment model.

WHAT: A payment recorded against an order by a payment method handler.

WHY: When a Xendit invoice is paid, the callback is turned into a Payment
carrying the full callback payload as metadata, so the settlement can be
reconciled manually against the Xendit dashboard later.

HOW: `transaction_id` holds the Xendit invoice id. The unique constraint on
(method, transaction_id) guarantees that the same invoice is never recorded
twice, even if two callbacks race.
"""

from enum import Enum
from typing import Any, Dict, Optional, TYPE_CHECKING
from sqlalchemy import (
    JSON,
    Column,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship, Mapped

from xendit_payments.models.base import Base, PrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from xendit_payments.models.order import Order


class PaymentState(str, Enum):
    """Payment states reported by payment method handlers."""

    CREATED = "Created"
    AUTHORIZED = "Authorized"
    SETTLED = "Settled"
    DECLINED = "Declined"
    ERROR = "Error"
    CANCELLED = "Cancelled"


class Payment(PrimaryKeyMixin, TimestampMixin, Base):
    """
    Payment recorded against an order.

    Attributes:
        id: Primary key
        order_id: Order the payment belongs to
        method: Code of the payment method used
        amount: Amount in minor units
        state: Payment state
        transaction_id: Provider transaction reference (Xendit invoice id)
        payment_metadata: Raw provider payload
        error_message: Reason for a declined or errored payment
    """

    __tablename__ = "payments"
    __table_args__ = (
        UniqueConstraint("method", "transaction_id", name="uq_payments_method_transaction"),
    )

    order_id: Mapped[int] = Column(
        Integer,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    method: Mapped[str] = Column(String(100), nullable=False)
    amount: Mapped[int] = Column(Integer, nullable=False)
    state: Mapped[PaymentState] = Column(
        SQLEnum(
            PaymentState,
            name="paymentstate",
            native_enum=False,
            length=20,
            values_callable=lambda enum: [e.value for e in enum],
        ),
        nullable=False,
        default=PaymentState.CREATED,
    )
    transaction_id: Mapped[Optional[str]] = Column(String(255), nullable=True, index=True)
    # WHY: "metadata" is reserved by SQLAlchemy's declarative base
    payment_metadata: Mapped[Dict[str, Any]] = Column(
        "metadata", JSON, nullable=False, default=dict
    )
    error_message: Mapped[Optional[str]] = Column(Text, nullable=True)

    order: Mapped["Order"] = relationship("Order", back_populates="payments")

    def __repr__(self) -> str:
        return (
            f"<Payment(id={self.id}, method={self.method}, "
            f"state={self.state}, transaction_id={self.transaction_id})>"
        )
