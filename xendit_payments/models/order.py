"""
Order model and order lifecycle states.

WHAT: SQLAlchemy model representing a customer order, plus the ordered set
of lifecycle states an order moves through.

WHY: The order is the object a Xendit invoice pays for. Its `code` is sent
to Xendit as the invoice `external_id` and comes back on the callback as
the correlation key; its `state` decides whether a payment may be added.

HOW: Uses SQLAlchemy 2.0 with:
- Channel relationship (tenant scoping)
- Customer relationship (payer email)
- Payments relationship (recorded payments)
- State stored as a string enum
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, TYPE_CHECKING
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship, Mapped

from xendit_payments.models.base import Base, PrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from xendit_payments.models.channel import Channel
    from xendit_payments.models.customer import Customer
    from xendit_payments.models.payment import Payment


class OrderState(str, Enum):
    """
    Order lifecycle states, in lifecycle order.

    WHY: Payments may only be added while the order is ARRANGING_PAYMENT.
    A settled callback for an order still ADDING_ITEMS moves it there first;
    orders that are already settled, shipped or cancelled cannot move back.
    """

    CREATED = "Created"
    ADDING_ITEMS = "AddingItems"
    ARRANGING_PAYMENT = "ArrangingPayment"
    PAYMENT_AUTHORIZED = "PaymentAuthorized"
    PAYMENT_SETTLED = "PaymentSettled"
    PARTIALLY_SHIPPED = "PartiallyShipped"
    SHIPPED = "Shipped"
    PARTIALLY_DELIVERED = "PartiallyDelivered"
    DELIVERED = "Delivered"
    MODIFYING = "Modifying"
    ARRANGING_ADDITIONAL_PAYMENT = "ArrangingAdditionalPayment"
    CANCELLED = "Cancelled"


class Order(PrimaryKeyMixin, TimestampMixin, Base):
    """
    Customer order.

    Attributes:
        id: Primary key
        code: Unique human-facing order code (Xendit external_id)
        state: Current lifecycle state
        active: True while the customer can still modify it in the shop
        channel_id: Channel (tenant) the order belongs to
        customer_id: Customer who owns the order
        total_with_tax: Amount due in minor units of currency_code
        currency_code: ISO currency code
        order_placed_at: When payment was settled
    """

    __tablename__ = "orders"

    code: Mapped[str] = Column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
        comment="Order code, sent to Xendit as external_id",
    )
    state: Mapped[OrderState] = Column(
        SQLEnum(
            OrderState,
            name="orderstate",
            native_enum=False,
            length=40,
            values_callable=lambda enum: [e.value for e in enum],
        ),
        nullable=False,
        default=OrderState.ADDING_ITEMS,
        index=True,
    )
    active: Mapped[bool] = Column(Boolean, nullable=False, default=True)

    channel_id: Mapped[int] = Column(
        Integer,
        ForeignKey("channels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    customer_id: Mapped[Optional[int]] = Column(
        Integer,
        ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    total_with_tax: Mapped[int] = Column(Integer, nullable=False, default=0)
    currency_code: Mapped[str] = Column(String(3), nullable=False, default="IDR")
    order_placed_at: Mapped[Optional[datetime]] = Column(DateTime, nullable=True)

    channel: Mapped["Channel"] = relationship("Channel", back_populates="orders")
    # WHY: selectin loading keeps these usable after an async query without
    # implicit I/O on attribute access
    customer: Mapped[Optional["Customer"]] = relationship(
        "Customer", back_populates="orders", lazy="selectin"
    )
    payments: Mapped[List["Payment"]] = relationship(
        "Payment",
        back_populates="order",
        lazy="selectin",
        order_by="Payment.id",
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, code={self.code}, state={self.state})>"

    @property
    def settled_amount(self) -> int:
        """
        Sum of settled payments.

        WHY: An order is only fully paid once settled payments cover the
        total; partial settlements leave it waiting for more payment.
        """
        from xendit_payments.models.payment import PaymentState

        return sum(p.amount for p in self.payments if p.state == PaymentState.SETTLED)

    @property
    def is_fully_paid(self) -> bool:
        return self.settled_amount >= self.total_with_tax
