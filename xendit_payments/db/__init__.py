"""Database package"""

from xendit_payments.db.session import AsyncSessionLocal, engine, get_db
from xendit_payments.models.base import Base

__all__ = ["Base", "AsyncSessionLocal", "engine", "get_db"]
