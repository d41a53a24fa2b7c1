"""
Xendit webhook reconciliation.

WHAT: Turns one inbound Xendit invoice callback into a settled payment on
the matching order, or into a diagnosable rejection.

WHY: Xendit retries any callback that is not acknowledged with a 2xx. Each
outcome therefore has to say whether Xendit should stop (payment recorded,
or already recorded earlier) or keep retrying, and a retry must never
record the payment twice.

HOW: A fixed sequence of steps, each of which either advances the
notification to the next state or ends it in a terminal state:

    RECEIVED -> VERIFIED -> ORDER_LOCATED -> PAYMENT_STATE_READY -> PAYMENT_RECORDED

Business refusals (unknown order, illegal transition, rejected payment) are
returned as outcomes. A missing Xendit payment method is a deployment
problem and is raised. Transport and database errors from collaborators
propagate unchanged.
"""

import inspect
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from xendit_payments.core.exceptions import ChannelNotFoundError, PaymentMethodMissingError
from xendit_payments.middleware.request_context import RequestMetadata
from xendit_payments.models.order import Order, OrderState
from xendit_payments.schemas.xendit import XenditCallbackRequest
from xendit_payments.services.payment_method_registry import find_method_for_handler
from xendit_payments.services.protocols import (
    NotificationLedger,
    OrderStore,
    PaymentMethodRegistry,
    TenantContextProvider,
)
from xendit_payments.services.results import OrderFailure, OrderSuccess
from xendit_payments.services.tenant_context import channel_token_from_description
from xendit_payments.services.xendit_handler import XENDIT_HANDLER_CODE

logger = logging.getLogger(__name__)

MISSING_TOKEN_MESSAGE = "Missing x-callback-token header"
BAD_SIGNATURE_MESSAGE = "Error verifying Xendit webhook signature"
NO_BODY_MESSAGE = "No invoice payload in the callback request"
SUCCESS_MESSAGE = "Ok"


class ReconciliationState(str, Enum):
    """States a notification passes through, including terminal failures."""

    RECEIVED = "received"
    VERIFIED = "verified"
    ORDER_LOCATED = "order_located"
    PAYMENT_STATE_READY = "payment_state_ready"
    PAYMENT_RECORDED = "payment_recorded"

    REJECTED_NO_TOKEN = "rejected_no_token"
    REJECTED_BAD_SIGNATURE = "rejected_bad_signature"
    REJECTED_NO_BODY = "rejected_no_body"
    ORDER_NOT_FOUND = "order_not_found"
    TRANSITION_FAILED = "transition_failed"
    PAYMENT_METHOD_MISSING = "payment_method_missing"
    PAYMENT_RECORD_FAILED = "payment_record_failed"

    # Replay of a notification that already produced a payment
    ALREADY_PROCESSED = "already_processed"


_SUCCESS_STATES = frozenset(
    {ReconciliationState.PAYMENT_RECORDED, ReconciliationState.ALREADY_PROCESSED}
)


@dataclass(frozen=True)
class ReconciliationOutcome:
    """
    Terminal result of reconciling one notification.

    Attributes:
        state: Terminal state reached
        message: Short diagnostic, safe to return to the caller
        notification_id: Xendit invoice ID, when the payload was readable
        order_code: Order code (external_id), when the payload was readable
        order_id: Order primary key, when the order was found
        payment_id: Payment created, on success
    """

    state: ReconciliationState
    message: str
    notification_id: Optional[str] = None
    order_code: Optional[str] = None
    order_id: Optional[int] = None
    payment_id: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.state in _SUCCESS_STATES


CallbackPayload = Union[bytes, str, Dict[str, Any], None]


def parse_callback_payload(
    payload: CallbackPayload,
) -> Optional[tuple]:
    """
    Parse a raw callback body.

    Returns:
        (raw dict, validated XenditCallbackRequest), or None if the body is
        absent, not a JSON object, or missing required fields
    """
    if payload is None:
        return None
    if isinstance(payload, (bytes, str)):
        if not payload.strip():
            return None
        try:
            payload = json.loads(payload)
        except ValueError:
            return None
    if not isinstance(payload, dict):
        return None
    try:
        notification = XenditCallbackRequest.model_validate(payload)
    except PydanticValidationError:
        return None
    return payload, notification


class WebhookReconciler:
    """
    Reconciles Xendit invoice callbacks with orders.

    WHAT: Orchestrates verifier, ledger, tenant context, order store and
    payment method registry for one notification at a time.

    WHY: Holds no state between notifications. Every decision is derived
    from the order store on each call, so concurrent requests need no
    locking here.

    Attributes:
        verifier: Object with verify(token) -> bool (sync or async)
        order_store: OrderStore
        payment_methods: PaymentMethodRegistry
        context_factory: TenantContextProvider
        ledger: NotificationLedger
        handler_code: Handler code the payment method must use
    """

    def __init__(
        self,
        verifier: Any,
        order_store: OrderStore,
        payment_methods: PaymentMethodRegistry,
        context_factory: TenantContextProvider,
        ledger: NotificationLedger,
        handler_code: str = XENDIT_HANDLER_CODE,
    ):
        self.verifier = verifier
        self.order_store = order_store
        self.payment_methods = payment_methods
        self.context_factory = context_factory
        self.ledger = ledger
        self.handler_code = handler_code

    async def _verify(self, callback_token: str) -> bool:
        result = self.verifier.verify(callback_token)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)

    async def reconcile(
        self,
        callback_token: Optional[str],
        payload: CallbackPayload,
        request_metadata: Optional[RequestMetadata] = None,
    ) -> ReconciliationOutcome:
        """
        Reconcile one callback.

        Args:
            callback_token: Value of the x-callback-token header
            payload: Raw request body (bytes/str) or an already decoded dict
            request_metadata: Metadata of the inbound request

        Returns:
            ReconciliationOutcome with the terminal state

        Raises:
            PaymentMethodMissingError: If no payment method uses the handler
        """
        request_id = request_metadata.request_id if request_metadata else None
        log_extra: Dict[str, Any] = {"request_id": request_id}

        # RECEIVED
        if not callback_token:
            logger.error(MISSING_TOKEN_MESSAGE, extra=log_extra)
            return ReconciliationOutcome(
                state=ReconciliationState.REJECTED_NO_TOKEN,
                message=MISSING_TOKEN_MESSAGE,
            )

        try:
            valid = await self._verify(callback_token)
        except Exception as e:
            logger.error(f"{BAD_SIGNATURE_MESSAGE}: {e}", extra=log_extra)
            valid = False
        if not valid:
            logger.error(BAD_SIGNATURE_MESSAGE, extra=log_extra)
            return ReconciliationOutcome(
                state=ReconciliationState.REJECTED_BAD_SIGNATURE,
                message=BAD_SIGNATURE_MESSAGE,
            )

        parsed = parse_callback_payload(payload)
        if parsed is None:
            logger.error(NO_BODY_MESSAGE, extra=log_extra)
            return ReconciliationOutcome(
                state=ReconciliationState.REJECTED_NO_BODY,
                message=NO_BODY_MESSAGE,
            )
        raw, notification = parsed

        # VERIFIED
        notification_id = notification.id
        order_code = notification.external_id
        log_extra.update(notification_id=notification_id, order_code=order_code)
        logger.debug(
            f"Xendit callback {notification_id} {ReconciliationState.VERIFIED.value}",
            extra=log_extra,
        )

        if await self.ledger.is_processed(notification_id):
            logger.info(
                f"Xendit payment id {notification_id} was already added to order {order_code}",
                extra=log_extra,
            )
            return ReconciliationOutcome(
                state=ReconciliationState.ALREADY_PROCESSED,
                message=SUCCESS_MESSAGE,
                notification_id=notification_id,
                order_code=order_code,
            )

        not_found_message = (
            f"Unable to find order {order_code}, unable to settle payment {notification_id}"
        )
        channel_token = channel_token_from_description(notification.description)
        try:
            ctx = await self.context_factory.create(channel_token, request_metadata)
        except ChannelNotFoundError:
            logger.error(not_found_message, extra=log_extra)
            return ReconciliationOutcome(
                state=ReconciliationState.ORDER_NOT_FOUND,
                message=not_found_message,
                notification_id=notification_id,
                order_code=order_code,
            )

        order: Optional[Order] = await self.order_store.find_by_code(ctx, order_code)
        if order is None:
            logger.error(not_found_message, extra=log_extra)
            return ReconciliationOutcome(
                state=ReconciliationState.ORDER_NOT_FOUND,
                message=not_found_message,
                notification_id=notification_id,
                order_code=order_code,
            )

        # ORDER_LOCATED
        if order.state != OrderState.ARRANGING_PAYMENT:
            result = await self.order_store.transition_state(
                ctx, order.id, OrderState.ARRANGING_PAYMENT
            )
            match result:
                case OrderFailure(message=reason):
                    message = (
                        f"Error transitioning order {order_code} to "
                        f"{OrderState.ARRANGING_PAYMENT.value} state: {reason}"
                    )
                    logger.error(message, extra=log_extra)
                    return ReconciliationOutcome(
                        state=ReconciliationState.TRANSITION_FAILED,
                        message=message,
                        notification_id=notification_id,
                        order_code=order_code,
                        order_id=order.id,
                    )
                case OrderSuccess():
                    pass

        # PAYMENT_STATE_READY
        method = await find_method_for_handler(self.payment_methods, ctx, self.handler_code)
        if method is None:
            logger.error(
                f"Could not find Xendit PaymentMethod for order {order_code}",
                extra=log_extra,
            )
            raise PaymentMethodMissingError(
                order_code=order_code,
                notification_id=notification_id,
                state=ReconciliationState.PAYMENT_METHOD_MISSING.value,
            )

        result = await self.order_store.add_payment(ctx, order.id, method.code, raw)
        match result:
            case OrderFailure(message=reason):
                message = f"Error adding payment to order {order_code}: {reason}"
                logger.error(message, extra=log_extra)
                return ReconciliationOutcome(
                    state=ReconciliationState.PAYMENT_RECORD_FAILED,
                    message=message,
                    notification_id=notification_id,
                    order_code=order_code,
                    order_id=order.id,
                )
            case OrderSuccess(payment=payment):
                payment_id = payment.id if payment is not None else None

        # PAYMENT_RECORDED
        await self.ledger.mark_processed(notification_id, order_code, payment_id)
        logger.info(
            f"Xendit payment id {notification_id} added to order {order_code}",
            extra=log_extra,
        )
        return ReconciliationOutcome(
            state=ReconciliationState.PAYMENT_RECORDED,
            message=SUCCESS_MESSAGE,
            notification_id=notification_id,
            order_code=order_code,
            order_id=order.id,
            payment_id=payment_id,
        )
