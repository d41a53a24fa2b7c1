"""
Test factories for creating test data.

WHY: Factories provide a consistent, reusable way to create test objects,
reducing duplication and making tests more maintainable. Using factories
instead of manual object creation ensures tests stay consistent when models change.
"""

from typing import Any, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from xendit_payments.models.channel import Channel
from xendit_payments.models.customer import Customer
from xendit_payments.models.order import Order, OrderState
from xendit_payments.models.payment import Payment, PaymentState
from xendit_payments.models.payment_method import PaymentMethod


class ChannelFactory:
    """Factory for creating Channel test instances."""

    @staticmethod
    async def create(
        session: AsyncSession,
        code: str = "default",
        token: str = "tenant1",
        currency_code: str = "IDR",
    ) -> Channel:
        channel = Channel(code=code, token=token, currency_code=currency_code)
        session.add(channel)
        await session.commit()
        await session.refresh(channel)
        return channel


class CustomerFactory:
    """Factory for creating Customer test instances."""

    _counter = 0

    @classmethod
    async def create(
        cls,
        session: AsyncSession,
        email_address: Optional[str] = None,
        first_name: str = "Budi",
        last_name: str = "Santoso",
    ) -> Customer:
        cls._counter += 1
        customer = Customer(
            email_address=email_address or f"customer{cls._counter}@example.com",
            first_name=first_name,
            last_name=last_name,
        )
        session.add(customer)
        await session.commit()
        await session.refresh(customer)
        return customer


class OrderFactory:
    """
    Factory for creating Order test instances.

    WHY: Orders need a channel and usually a customer; the factory keeps
    the defaults (AddingItems, active, IDR) in one place.
    """

    _counter = 0

    @classmethod
    async def create(
        cls,
        session: AsyncSession,
        channel: Channel,
        customer: Optional[Customer] = None,
        code: Optional[str] = None,
        state: OrderState = OrderState.ADDING_ITEMS,
        total_with_tax: int = 100000,
        active: bool = True,
    ) -> Order:
        cls._counter += 1
        order = Order(
            code=code or f"ORDER{cls._counter:05d}",
            state=state,
            channel_id=channel.id,
            customer_id=customer.id if customer else None,
            total_with_tax=total_with_tax,
            currency_code=channel.currency_code,
            active=active,
        )
        session.add(order)
        await session.commit()
        await session.refresh(order)
        return order


class PaymentMethodFactory:
    """Factory for creating PaymentMethod test instances."""

    @staticmethod
    async def create(
        session: AsyncSession,
        channel: Channel,
        code: str = "xendit",
        handler_code: str = "xendit",
        name: str = "Xendit",
        enabled: bool = True,
    ) -> PaymentMethod:
        method = PaymentMethod(
            code=code,
            name=name,
            handler_code=handler_code,
            channel_id=channel.id,
            enabled=enabled,
        )
        session.add(method)
        await session.commit()
        await session.refresh(method)
        return method


class PaymentFactory:
    """Factory for creating Payment test instances."""

    @staticmethod
    async def create(
        session: AsyncSession,
        order: Order,
        method: str = "xendit",
        amount: int = 100000,
        state: PaymentState = PaymentState.SETTLED,
        transaction_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Payment:
        payment = Payment(
            order_id=order.id,
            method=method,
            amount=amount,
            state=state,
            transaction_id=transaction_id,
            payment_metadata=metadata or {},
        )
        session.add(payment)
        await session.commit()
        await session.refresh(payment)
        return payment


def xendit_callback_payload(
    invoice_id: str = "inv-1",
    external_id: str = "ORD123",
    description: str = "tenant1_55",
    amount: int = 150000,
    status: str = "PAID",
    **extra: Any,
) -> Dict[str, Any]:
    """
    Build a Xendit invoice callback body.

    WHY: Mirrors the fields Xendit sends for a paid invoice, including
    ones the service never reads, so metadata round-trips can be checked.
    """
    payload = {
        "id": invoice_id,
        "external_id": external_id,
        "user_id": "5f0e8b7c3a1b2c0019a1b2c3",
        "is_high": False,
        "payment_method": "BANK_TRANSFER",
        "status": status,
        "merchant_name": "Toko Test",
        "amount": amount,
        "paid_amount": amount,
        "bank_code": "BCA",
        "paid_at": "2026-10-19T08:15:03.404Z",
        "payer_email": "customer@example.com",
        "description": description,
        "created": "2026-10-19T08:00:00.000Z",
        "updated": "2026-10-19T08:15:04.000Z",
        "currency": "IDR",
        "payment_channel": "BCA",
    }
    payload.update(extra)
    return payload


def xendit_invoice_response(**overrides: Any) -> Dict[str, Any]:
    """Build a Xendit create-invoice response body."""
    response = {
        "id": "579c8d61f23fa4ca35e52da4",
        "user_id": "5781d19b2e2385880609791c",
        "external_id": "ORD123",
        "status": "PENDING",
        "merchant_name": "Toko Test",
        "amount": 150000,
        "payer_email": "customer@example.com",
        "description": "tenant1_55",
        "invoice_url": "https://checkout.xendit.co/web/579c8d61f23fa4ca35e52da4",
        "expiry_date": "2026-10-20T08:00:00.000Z",
        "currency": "IDR",
        "available_banks": [
            {
                "bank_code": "BCA",
                "collection_type": "POOL",
                "transfer_amount": 150000,
                "bank_branch": "Virtual Account",
                "account_holder_name": "TOKO TEST",
            }
        ],
        "available_retail_outlets": [{"retail_outlet_name": "ALFAMART"}],
        "available_paylaters": [],
    }
    response.update(overrides)
    return response
