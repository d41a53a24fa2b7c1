"""
Integration tests for the Xendit callback endpoint.

WHAT: Posts callbacks through the full FastAPI stack (middleware,
dependencies, exception handlers) against a SQLite database.

WHY: The status code is what Xendit's retry policy reacts to, so each
outcome is checked at the HTTP level.
"""

import json

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from tests.conftest import TEST_CALLBACK_TOKEN
from tests.factories import OrderFactory, xendit_callback_payload
from xendit_payments.models.order import OrderState
from xendit_payments.models.payment import Payment, PaymentState
from xendit_payments.models.processed_notification import ProcessedNotification

WEBHOOK_URL = "/payments/xendit"
HEADERS = {"x-callback-token": TEST_CALLBACK_TOKEN}


async def _count(db_session, model) -> int:
    result = await db_session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


@pytest_asyncio.fixture
async def ready(test_order, xendit_method):
    """ORD123 in channel tenant1 with a Xendit payment method configured."""
    return test_order


class TestXenditWebhook:
    """Tests for POST /payments/xendit."""

    @pytest.mark.asyncio
    async def test_settles_order(self, client, db_session, ready):
        payload = xendit_callback_payload()

        response = await client.post(WEBHOOK_URL, json=payload, headers=HEADERS)

        assert response.status_code == 200
        assert response.text == "Ok"
        assert response.headers["X-Request-ID"]

        assert ready.state == OrderState.PAYMENT_SETTLED
        assert ready.active is False
        payments = (await db_session.execute(select(Payment))).scalars().all()
        assert len(payments) == 1
        assert payments[0].state == PaymentState.SETTLED
        assert payments[0].transaction_id == "inv-1"
        assert payments[0].amount == 150000
        assert payments[0].payment_metadata == payload

        entry = (await db_session.execute(select(ProcessedNotification))).scalar_one()
        assert entry.notification_id == "inv-1"
        assert entry.order_code == "ORD123"
        assert entry.payment_id == payments[0].id

    @pytest.mark.asyncio
    async def test_ledger_links_payment_with_xendit_payment_id(self, client, db_session, ready):
        payload = xendit_callback_payload(xenditPaymentId="pay-77")

        response = await client.post(WEBHOOK_URL, json=payload, headers=HEADERS)

        assert response.status_code == 200
        payment = (await db_session.execute(select(Payment))).scalar_one()
        assert payment.transaction_id == "pay-77"

        entry = (await db_session.execute(select(ProcessedNotification))).scalar_one()
        assert entry.notification_id == "inv-1"
        assert entry.payment_id == payment.id

    @pytest.mark.asyncio
    async def test_replay_records_one_payment(self, client, db_session, ready):
        body = json.dumps(xendit_callback_payload())

        first = await client.post(WEBHOOK_URL, content=body, headers=HEADERS)
        second = await client.post(WEBHOOK_URL, content=body, headers=HEADERS)

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.text == "Ok"
        assert await _count(db_session, Payment) == 1

    @pytest.mark.asyncio
    async def test_order_already_arranging_payment(self, client, db_session, test_channel, xendit_method):
        order = await OrderFactory.create(
            db_session,
            channel=test_channel,
            code="ORD123",
            state=OrderState.ARRANGING_PAYMENT,
            total_with_tax=150000,
        )

        response = await client.post(WEBHOOK_URL, json=xendit_callback_payload(), headers=HEADERS)

        assert response.status_code == 200
        assert order.state == OrderState.PAYMENT_SETTLED

    @pytest.mark.asyncio
    async def test_missing_token(self, client, db_session, ready):
        response = await client.post(WEBHOOK_URL, json=xendit_callback_payload())

        assert response.status_code == 400
        assert response.text == "Missing x-callback-token header"
        assert ready.state == OrderState.ADDING_ITEMS
        assert await _count(db_session, Payment) == 0

    @pytest.mark.asyncio
    async def test_bad_token(self, client, db_session, ready):
        response = await client.post(
            WEBHOOK_URL,
            json=xendit_callback_payload(),
            headers={"x-callback-token": "abc"},
        )

        assert response.status_code == 400
        assert response.text == "Error verifying Xendit webhook signature"
        assert ready.state == OrderState.ADDING_ITEMS

    @pytest.mark.asyncio
    async def test_missing_body(self, client, ready):
        response = await client.post(WEBHOOK_URL, headers=HEADERS)

        assert response.status_code == 400
        assert response.text == "No invoice payload in the callback request"

    @pytest.mark.asyncio
    async def test_unknown_order(self, client, ready):
        response = await client.post(
            WEBHOOK_URL,
            json=xendit_callback_payload(external_id="ORD999"),
            headers=HEADERS,
        )

        assert response.status_code == 404
        assert "ORD999" in response.text

    @pytest.mark.asyncio
    async def test_unknown_channel(self, client, ready):
        response = await client.post(
            WEBHOOK_URL,
            json=xendit_callback_payload(description="tenant9_55"),
            headers=HEADERS,
        )

        assert response.status_code == 404
        assert ready.state == OrderState.ADDING_ITEMS

    @pytest.mark.asyncio
    async def test_cancelled_order(self, client, db_session, test_channel, xendit_method):
        await OrderFactory.create(
            db_session, channel=test_channel, code="ORD123", state=OrderState.CANCELLED
        )

        response = await client.post(WEBHOOK_URL, json=xendit_callback_payload(), headers=HEADERS)

        assert response.status_code == 409
        assert response.text.startswith("Error transitioning order ORD123 to ArrangingPayment")
        assert await _count(db_session, Payment) == 0

    @pytest.mark.asyncio
    async def test_payment_method_missing(self, client, db_session, test_order):
        response = await client.post(WEBHOOK_URL, json=xendit_callback_payload(), headers=HEADERS)

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "PaymentMethodMissingError"
        assert body["message"] == "Could not find Xendit PaymentMethod"
        assert await _count(db_session, Payment) == 0


class TestHealth:
    """Tests for GET /health."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
