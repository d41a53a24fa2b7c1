"""
Tagged results returned by the order store.

WHAT: `OrderResult` is either `OrderSuccess(order, payment)` or
`OrderFailure(code, message)`.

WHY: State transitions and payment recording can be refused for ordinary
business reasons (order already settled, duplicate payment). Those are
expected outcomes for a webhook, not exceptional ones, so they are returned
as values that callers must inspect rather than raised.

HOW: Callers branch with a `match` statement over both variants.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from xendit_payments.models.order import Order
from xendit_payments.models.payment import Payment


class OrderErrorCode(str, Enum):
    """Reasons the order store can refuse an operation."""

    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ORDER_STATE_TRANSITION_ERROR = "ORDER_STATE_TRANSITION_ERROR"
    ORDER_PAYMENT_STATE_ERROR = "ORDER_PAYMENT_STATE_ERROR"
    INELIGIBLE_PAYMENT_METHOD = "INELIGIBLE_PAYMENT_METHOD"
    DUPLICATE_PAYMENT = "DUPLICATE_PAYMENT"
    PAYMENT_FAILED = "PAYMENT_FAILED"


@dataclass(frozen=True)
class OrderSuccess:
    order: Order
    # Set by add_payment to the payment it recorded
    payment: Optional[Payment] = None


@dataclass(frozen=True)
class OrderFailure:
    code: OrderErrorCode
    message: str


OrderResult = Union[OrderSuccess, OrderFailure]
