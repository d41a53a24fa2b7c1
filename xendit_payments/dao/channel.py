"""
Channel Data Access Object (DAO).

WHAT: Database operations for the Channel model.

WHY: Channel lookup by token is the first step of every tenant-scoped
operation, both for shop requests and for Xendit callbacks.
"""

from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from xendit_payments.dao.base import BaseDAO
from xendit_payments.models.channel import Channel
from xendit_payments.core.exceptions import ValidationError

# Separates the channel token from the order id in invoice descriptions
CHANNEL_TOKEN_SEPARATOR = "_"


class ChannelDAO(BaseDAO[Channel]):
    """Data Access Object for Channel model."""

    def __init__(self, session: AsyncSession):
        super().__init__(Channel, session)

    async def get_by_token(self, token: str) -> Optional[Channel]:
        """
        Get a channel by its token.

        Args:
            token: Channel token

        Returns:
            Channel if found, None otherwise
        """
        result = await self.session.execute(select(Channel).where(Channel.token == token))
        return result.scalar_one_or_none()

    async def create_channel(
        self,
        code: str,
        token: str,
        currency_code: str = "IDR",
    ) -> Channel:
        """
        Create a channel.

        WHY: The token is embedded in Xendit invoice descriptions as
        "<token>_<orderId>" and recovered by splitting on the first '_'.
        A token containing the separator could never be recovered, so it
        is rejected here.

        Raises:
            ValidationError: If the token is empty or contains '_'
        """
        if not token or CHANNEL_TOKEN_SEPARATOR in token:
            raise ValidationError(
                message=f"Channel token must be non-empty and must not contain "
                f"'{CHANNEL_TOKEN_SEPARATOR}'",
                field="token",
            )
        return await self.create(code=code, token=token, currency_code=currency_code)
