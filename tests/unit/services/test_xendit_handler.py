"""
Unit tests for the Xendit payment method handler and handler registry.
"""

import pytest
from types import SimpleNamespace

from xendit_payments.models.payment import PaymentState
from xendit_payments.services.xendit_handler import (
    XENDIT_HANDLER_CODE,
    PaymentHandlerRegistry,
    XenditPaymentMethodHandler,
    default_handler_registry,
)
from tests.factories import xendit_callback_payload


class TestXenditPaymentMethodHandler:
    """Tests for XenditPaymentMethodHandler."""

    @pytest.fixture
    def handler(self):
        return XenditPaymentMethodHandler()

    @pytest.mark.asyncio
    async def test_create_payment_is_settled(self, handler):
        payload = xendit_callback_payload()

        result = await handler.create_payment(None, None, 150000, payload)

        assert result.state == PaymentState.SETTLED
        assert result.amount == 150000
        assert result.transaction_id == "inv-1"
        assert result.metadata == payload
        assert result.error_message is None

    @pytest.mark.asyncio
    async def test_create_payment_prefers_xendit_payment_id(self, handler):
        payload = xendit_callback_payload(xenditPaymentId="pay-9")

        result = await handler.create_payment(None, None, 150000, payload)

        assert result.transaction_id == "pay-9"

    @pytest.mark.asyncio
    async def test_create_payment_without_ids(self, handler):
        result = await handler.create_payment(None, None, 1000, {"status": "PAID"})
        assert result.transaction_id is None

    @pytest.mark.asyncio
    async def test_settle_payment(self, handler):
        result = await handler.settle_payment()
        assert result.success is True

    @pytest.mark.asyncio
    async def test_create_refund(self, handler):
        payment = SimpleNamespace(id=7, transaction_id="inv-1")

        result = await handler.create_refund(payment)

        assert result.state == PaymentState.SETTLED
        assert result.transaction_id == "inv-1"


class TestPaymentHandlerRegistry:
    """Tests for PaymentHandlerRegistry."""

    def test_default_registry_has_xendit(self):
        registry = default_handler_registry()

        assert XENDIT_HANDLER_CODE in registry
        assert isinstance(registry.get(XENDIT_HANDLER_CODE), XenditPaymentMethodHandler)

    def test_unknown_handler(self):
        registry = PaymentHandlerRegistry()

        assert "cash" not in registry
        assert registry.get("cash") is None

    def test_register(self):
        cash = SimpleNamespace(code="cash")
        registry = PaymentHandlerRegistry()

        registry.register(cash)

        assert registry.get("cash") is cash
