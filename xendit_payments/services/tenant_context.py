"""
Tenant (channel) context for order operations.

WHAT: An immutable, request-scoped description of which channel an
operation runs in, plus the request it came from.

WHY: Xendit callbacks do not identify our tenant directly. When an invoice
is created its description is set to "<channelToken>_<orderId>"; on
callback the token is recovered from that description and turned into a
TenantContext that scopes every order lookup.

HOW: The encoding lives in exactly two functions,
`invoice_description` and `channel_token_from_description`, so it can be
replaced by a structured correlation id without touching the reconciler.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from xendit_payments.core.exceptions import ChannelNotFoundError
from xendit_payments.dao.channel import CHANNEL_TOKEN_SEPARATOR, ChannelDAO
from xendit_payments.middleware.request_context import RequestMetadata

logger = logging.getLogger(__name__)

API_TYPE_SHOP = "shop"
API_TYPE_ADMIN = "admin"


@dataclass(frozen=True)
class TenantContext:
    """
    Channel-scoped context passed to every order store operation.

    Attributes:
        channel_id: Channel primary key
        channel_token: Channel token
        channel_code: Channel code
        currency_code: Channel default currency
        api_type: "shop" for customer requests, "admin" for callbacks
        request_id: Request correlation id
        ip_address: Client IP address
    """

    channel_id: int
    channel_token: str
    channel_code: str
    currency_code: str
    api_type: str = API_TYPE_SHOP
    request_id: Optional[str] = None
    ip_address: Optional[str] = None


def invoice_description(channel_token: str, order_id: int) -> str:
    """Encode the channel token and order id into an invoice description."""
    return f"{channel_token}{CHANNEL_TOKEN_SEPARATOR}{order_id}"


def channel_token_from_description(description: Optional[str]) -> str:
    """
    Recover the channel token from an invoice description.

    Splits on the first '_'. A description without a separator is taken
    to be the token itself; a missing description yields an empty token.
    """
    if not description:
        return ""
    return description.split(CHANNEL_TOKEN_SEPARATOR, 1)[0]


class TenantContextFactory:
    """
    Builds TenantContext instances from channel tokens.

    WHY: Resolving the channel on every call keeps channel changes visible
    immediately and keeps the factory free of shared state.
    """

    def __init__(self, session: AsyncSession):
        self.channel_dao = ChannelDAO(session)

    async def create(
        self,
        channel_token: str,
        request_metadata: Optional[RequestMetadata] = None,
        api_type: str = API_TYPE_ADMIN,
    ) -> TenantContext:
        """
        Create a context for the channel identified by `channel_token`.

        Args:
            channel_token: Channel token
            request_metadata: Metadata of the request being served
            api_type: Which API the operation runs under

        Returns:
            TenantContext for the channel

        Raises:
            ChannelNotFoundError: If no channel has the token
        """
        channel = await self.channel_dao.get_by_token(channel_token) if channel_token else None
        if channel is None:
            logger.warning(
                "Unknown channel token",
                extra={"request_id": request_metadata.request_id if request_metadata else None},
            )
            raise ChannelNotFoundError()

        return TenantContext(
            channel_id=channel.id,
            channel_token=channel.token,
            channel_code=channel.code,
            currency_code=channel.currency_code,
            api_type=api_type,
            request_id=request_metadata.request_id if request_metadata else None,
            ip_address=request_metadata.ip_address if request_metadata else None,
        )
