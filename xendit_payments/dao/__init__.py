"""
Data Access Object (DAO) package.

WHY: DAOs provide a clean separation between database operations and business logic,
making the codebase more testable and maintainable.
"""

from xendit_payments.dao.base import BaseDAO
from xendit_payments.dao.channel import ChannelDAO, CHANNEL_TOKEN_SEPARATOR
from xendit_payments.dao.order import OrderDAO
from xendit_payments.dao.payment import PaymentDAO
from xendit_payments.dao.payment_method import PaymentMethodDAO
from xendit_payments.dao.processed_notification import ProcessedNotificationDAO

__all__ = [
    "BaseDAO",
    "ChannelDAO",
    "CHANNEL_TOKEN_SEPARATOR",
    "OrderDAO",
    "PaymentDAO",
    "PaymentMethodDAO",
    "ProcessedNotificationDAO",
]
