"""
Unit tests for ChannelDAO.

WHY: A channel token is recovered from invoice descriptions by splitting
on '_', so tokens containing it must never be stored.
"""

import pytest

from xendit_payments.core.exceptions import ValidationError
from xendit_payments.dao.channel import ChannelDAO


class TestChannelDAO:
    """Tests for ChannelDAO."""

    @pytest.mark.asyncio
    async def test_create_and_get_by_token(self, db_session):
        dao = ChannelDAO(db_session)

        created = await dao.create_channel(code="default", token="tenant1")
        found = await dao.get_by_token("tenant1")

        assert found.id == created.id
        assert found.currency_code == "IDR"

    @pytest.mark.asyncio
    async def test_get_by_unknown_token(self, db_session, test_channel):
        assert await ChannelDAO(db_session).get_by_token("tenant2") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["tenant_1", "_", ""])
    async def test_rejects_unrecoverable_tokens(self, db_session, token):
        with pytest.raises(ValidationError) as exc_info:
            await ChannelDAO(db_session).create_channel(code="bad", token=token)

        assert exc_info.value.context["field"] == "token"
