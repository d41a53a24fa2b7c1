"""
Database models package.

WHY: Centralizing model imports ensures Alembic can discover all models
for migration generation and makes it easier to import models elsewhere.
"""

from xendit_payments.models.base import Base, TimestampMixin, PrimaryKeyMixin
from xendit_payments.models.channel import Channel
from xendit_payments.models.customer import Customer
from xendit_payments.models.order import Order, OrderState
from xendit_payments.models.payment import Payment, PaymentState
from xendit_payments.models.payment_method import PaymentMethod
from xendit_payments.models.processed_notification import ProcessedNotification

__all__ = [
    "Base",
    "TimestampMixin",
    "PrimaryKeyMixin",
    "Channel",
    "Customer",
    "Order",
    "OrderState",
    "Payment",
    "PaymentState",
    "PaymentMethod",
    "ProcessedNotification",
]
