"""
Base Data Access Object (DAO) class.

WHY: The DAO pattern separates database operations from business logic,
making the codebase more testable and keeping SQL out of the payment
services.
"""

from typing import Any, Generic, Optional, Type, TypeVar
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from xendit_payments.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseDAO(Generic[ModelType]):
    """
    Base Data Access Object shared by all models.

    WHY: Every DAO works inside the caller's session and never commits;
    the request (or test) owns the transaction, so a callback's payment
    and its ledger entry are committed together.

    Type Parameters:
        ModelType: The SQLAlchemy model class this DAO manages
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def create(self, **kwargs: Any) -> ModelType:
        """
        Create a new record.

        Args:
            **kwargs: Field values for the new record

        Returns:
            The created instance with database-generated fields populated

        Raises:
            IntegrityError: If unique constraints are violated
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()  # Flush to get auto-generated fields
        await self.session.refresh(instance)
        return instance

    async def get_by_id(self, id: int) -> Optional[ModelType]:
        return await self.session.get(self.model, id)

    async def get_by_id_and_channel(self, id: int, channel_id: int) -> Optional[ModelType]:
        """
        Retrieve a record by ID, ensuring it belongs to the specified channel.

        WHY: Channel-scoped lookups prevent a callback or shop session for
        one tenant from reaching another tenant's records.

        Raises:
            AttributeError: If the model doesn't have a channel_id field
        """
        if not hasattr(self.model, "channel_id"):
            raise AttributeError(
                f"{self.model.__name__} is not a channel-scoped model (no channel_id field)"
            )

        result = await self.session.execute(
            select(self.model).where(
                self.model.id == id,
                self.model.channel_id == channel_id,
            )
        )
        return result.scalar_one_or_none()
