"""Customer model."""

from typing import List, Optional, TYPE_CHECKING
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship, Mapped

from xendit_payments.models.base import Base, PrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from xendit_payments.models.order import Order


class Customer(PrimaryKeyMixin, TimestampMixin, Base):
    """
    Shop customer who owns orders.

    WHY: Xendit invoices are addressed to the payer's email address, taken
    from the customer of the order being paid.
    """

    __tablename__ = "customers"

    email_address: Mapped[str] = Column(String(255), nullable=False, index=True)
    first_name: Mapped[Optional[str]] = Column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = Column(String(100), nullable=True)

    orders: Mapped[List["Order"]] = relationship("Order", back_populates="customer")

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, email={self.email_address})>"
