"""
Order service (the order store).

WHAT: Channel-scoped order operations used by the webhook reconciler and
the shop API: lookup by code, state transitions, payment recording and
active-order lookup.

WHY: All order rules live here so that callbacks and shop requests apply
the same state machine and the same duplicate-payment protection.

HOW: Refusals are returned as OrderFailure values. Database errors are not
caught here; they propagate to the caller's transaction boundary.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from xendit_payments.dao.order import OrderDAO
from xendit_payments.dao.payment import PaymentDAO
from xendit_payments.dao.payment_method import PaymentMethodDAO
from xendit_payments.models.order import Order, OrderState
from xendit_payments.models.payment import PaymentState
from xendit_payments.services.order_state_machine import (
    can_transition,
    transition_error_message,
)
from xendit_payments.services.results import (
    OrderErrorCode,
    OrderFailure,
    OrderResult,
    OrderSuccess,
)
from xendit_payments.services.tenant_context import TenantContext
from xendit_payments.services.xendit_handler import (
    PaymentHandlerRegistry,
    default_handler_registry,
)

logger = logging.getLogger(__name__)

_FAILED_PAYMENT_STATES = (PaymentState.DECLINED, PaymentState.ERROR, PaymentState.CANCELLED)


class OrderService:
    """
    SQLAlchemy implementation of the order store.

    Attributes:
        session: Database session (transaction owned by the caller)
        handlers: Payment handlers by code
    """

    def __init__(
        self,
        session: AsyncSession,
        handlers: Optional[PaymentHandlerRegistry] = None,
    ):
        self.session = session
        self.handlers = handlers or default_handler_registry()
        self.order_dao = OrderDAO(session)
        self.payment_dao = PaymentDAO(session)
        self.payment_method_dao = PaymentMethodDAO(session)

    async def find_by_code(self, ctx: TenantContext, code: str) -> Optional[Order]:
        """
        Find an order by code in the context's channel.

        Returns:
            Order if it exists in the channel, None otherwise
        """
        return await self.order_dao.get_by_code(code, ctx.channel_id)

    async def get_active_order(self, ctx: TenantContext, customer_id: int) -> Optional[Order]:
        return await self.order_dao.get_active_for_customer(customer_id, ctx.channel_id)

    async def transition_state(
        self,
        ctx: TenantContext,
        order_id: int,
        target: OrderState,
    ) -> OrderResult:
        """
        Move an order to another state.

        WHAT: Applies one transition from ORDER_STATE_TRANSITIONS.

        WHY: An illegal transition is a normal outcome when a callback
        arrives for an order that has already moved on, so it is returned
        rather than raised.

        Args:
            ctx: Tenant context
            order_id: Order ID
            target: State to move to

        Returns:
            OrderSuccess with the updated order, or OrderFailure with
            ORDER_NOT_FOUND / ORDER_STATE_TRANSITION_ERROR
        """
        order = await self.order_dao.get_by_id_and_channel(order_id, ctx.channel_id)
        if order is None:
            return OrderFailure(
                code=OrderErrorCode.ORDER_NOT_FOUND,
                message=f"No Order with the id {order_id} could be found",
            )

        if not can_transition(order.state, target):
            return OrderFailure(
                code=OrderErrorCode.ORDER_STATE_TRANSITION_ERROR,
                message=transition_error_message(order.state, target),
            )

        from_state = order.state
        order.state = target
        if target == OrderState.PAYMENT_SETTLED:
            order.active = False
            order.order_placed_at = datetime.utcnow()
        await self.session.flush()

        logger.info(
            f"Order {order.code} transitioned from {from_state.value} to {target.value}",
            extra={"order_code": order.code, "request_id": ctx.request_id},
        )
        return OrderSuccess(order=order)

    async def add_payment(
        self,
        ctx: TenantContext,
        order_id: int,
        method_code: str,
        metadata: Dict[str, Any],
    ) -> OrderResult:
        """
        Record a payment against an order.

        WHAT: Creates a payment through the method's handler for the
        outstanding amount of the order.

        WHY: The order must already be ArrangingPayment. A settled payment
        that covers the total moves the order to PaymentSettled; a partial
        one leaves it waiting for further payment.

        HOW:
        1. Load the order in the channel, check its state
        2. Resolve the enabled payment method and its handler
        3. Let the handler build the payment, reject duplicate transaction ids
        4. Persist the payment and settle the order when fully paid

        Args:
            ctx: Tenant context
            order_id: Order ID
            method_code: Code of the payment method
            metadata: Provider payload stored with the payment

        Returns:
            OrderSuccess with the updated order and the recorded payment,
            or OrderFailure
        """
        order = await self.order_dao.get_by_id_and_channel(order_id, ctx.channel_id)
        if order is None:
            return OrderFailure(
                code=OrderErrorCode.ORDER_NOT_FOUND,
                message=f"No Order with the id {order_id} could be found",
            )

        if order.state != OrderState.ARRANGING_PAYMENT:
            return OrderFailure(
                code=OrderErrorCode.ORDER_PAYMENT_STATE_ERROR,
                message=f"A Payment may only be added when Order is in "
                f"{OrderState.ARRANGING_PAYMENT.value} state, not {order.state.value}",
            )

        method = await self.payment_method_dao.get_by_code(method_code, ctx.channel_id)
        handler = self.handlers.get(method.handler_code) if method else None
        if method is None or not method.enabled or handler is None:
            return OrderFailure(
                code=OrderErrorCode.INELIGIBLE_PAYMENT_METHOD,
                message=f"The payment method {method_code} is not eligible for this Order",
            )

        amount = max(order.total_with_tax - order.settled_amount, 0)
        result = await handler.create_payment(ctx, order, amount, metadata)

        if result.transaction_id:
            existing = await self.payment_dao.get_by_transaction_id(
                method.code, result.transaction_id
            )
            if existing is not None:
                return OrderFailure(
                    code=OrderErrorCode.DUPLICATE_PAYMENT,
                    message=f"A payment with transaction id {result.transaction_id} "
                    f"has already been recorded",
                )

        payment = await self.payment_dao.create(
            order_id=order.id,
            method=method.code,
            amount=result.amount,
            state=result.state,
            transaction_id=result.transaction_id,
            payment_metadata=result.metadata,
            error_message=result.error_message,
        )
        await self.session.refresh(order, attribute_names=["payments"])

        if payment.state in _FAILED_PAYMENT_STATES:
            logger.warning(
                f"Payment {payment.id} for order {order.code} was {payment.state.value}",
                extra={"order_code": order.code, "request_id": ctx.request_id},
            )
            return OrderFailure(
                code=OrderErrorCode.PAYMENT_FAILED,
                message=payment.error_message or f"Payment {payment.state.value}",
            )

        if payment.state == PaymentState.SETTLED and order.is_fully_paid:
            settled = await self.transition_state(ctx, order.id, OrderState.PAYMENT_SETTLED)
            if isinstance(settled, OrderFailure):
                return settled

        logger.info(
            f"Payment {payment.id} ({payment.state.value}) added to order {order.code}",
            extra={"order_code": order.code, "request_id": ctx.request_id},
        )
        return OrderSuccess(order=order, payment=payment)
