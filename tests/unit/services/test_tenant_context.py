"""
Unit tests for tenant context helpers and TenantContextFactory.

WHY: The channel token recovered from the invoice description is the only
thing that scopes a callback to a tenant.
"""

import pytest

from xendit_payments.core.exceptions import ChannelNotFoundError
from xendit_payments.middleware.request_context import RequestMetadata
from xendit_payments.services.tenant_context import (
    API_TYPE_ADMIN,
    API_TYPE_SHOP,
    TenantContextFactory,
    channel_token_from_description,
    invoice_description,
)


class TestDescriptionEncoding:
    """Tests for the invoice description encoding."""

    def test_invoice_description(self):
        assert invoice_description("tenant1", 55) == "tenant1_55"

    def test_channel_token_from_description(self):
        assert channel_token_from_description("tenant1_55") == "tenant1"

    def test_splits_on_first_separator_only(self):
        assert channel_token_from_description("tenant1_55_extra") == "tenant1"

    def test_description_without_separator(self):
        assert channel_token_from_description("tenant1") == "tenant1"

    @pytest.mark.parametrize("description", [None, ""])
    def test_missing_description(self, description):
        assert channel_token_from_description(description) == ""

    def test_round_trip(self):
        assert channel_token_from_description(invoice_description("abc", 1)) == "abc"


class TestTenantContextFactory:
    """Tests for TenantContextFactory."""

    @pytest.mark.asyncio
    async def test_create_for_known_channel(self, db_session, test_channel):
        metadata = RequestMetadata(
            request_id="req-1",
            ip_address="203.0.113.9",
            user_agent="Xendit",
            path="/payments/xendit",
            method="POST",
        )

        ctx = await TenantContextFactory(db_session).create("tenant1", metadata)

        assert ctx.channel_id == test_channel.id
        assert ctx.channel_token == "tenant1"
        assert ctx.channel_code == "default"
        assert ctx.currency_code == "IDR"
        assert ctx.api_type == API_TYPE_ADMIN
        assert ctx.request_id == "req-1"
        assert ctx.ip_address == "203.0.113.9"

    @pytest.mark.asyncio
    async def test_create_with_api_type(self, db_session, test_channel):
        ctx = await TenantContextFactory(db_session).create("tenant1", None, api_type=API_TYPE_SHOP)

        assert ctx.api_type == API_TYPE_SHOP
        assert ctx.request_id is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["unknown", ""])
    async def test_unknown_channel(self, db_session, test_channel, token):
        with pytest.raises(ChannelNotFoundError):
            await TenantContextFactory(db_session).create(token)
