"""
Order state machine.

WHAT: The single table of allowed order state transitions.

WHY: Whether a settled Xendit invoice may be recorded depends on where the
order is in its lifecycle. An order that is already settled, shipped or
cancelled must not be pulled back into ArrangingPayment by a late or
replayed callback.

HOW: `ORDER_STATE_TRANSITIONS` maps each state to the states it may move
to. Terminal states map to an empty list.
"""

from typing import Dict, List

from xendit_payments.models.order import OrderState


ORDER_STATE_TRANSITIONS: Dict[OrderState, List[OrderState]] = {
    OrderState.CREATED: [OrderState.ADDING_ITEMS],
    OrderState.ADDING_ITEMS: [OrderState.ARRANGING_PAYMENT, OrderState.CANCELLED],
    OrderState.ARRANGING_PAYMENT: [
        OrderState.PAYMENT_AUTHORIZED,
        OrderState.PAYMENT_SETTLED,
        OrderState.ADDING_ITEMS,
        OrderState.CANCELLED,
    ],
    OrderState.PAYMENT_AUTHORIZED: [
        OrderState.PAYMENT_SETTLED,
        OrderState.MODIFYING,
        OrderState.CANCELLED,
    ],
    OrderState.PAYMENT_SETTLED: [
        OrderState.PARTIALLY_SHIPPED,
        OrderState.SHIPPED,
        OrderState.PARTIALLY_DELIVERED,
        OrderState.DELIVERED,
        OrderState.MODIFYING,
        OrderState.CANCELLED,
    ],
    OrderState.PARTIALLY_SHIPPED: [
        OrderState.SHIPPED,
        OrderState.PARTIALLY_DELIVERED,
        OrderState.MODIFYING,
        OrderState.CANCELLED,
    ],
    OrderState.SHIPPED: [
        OrderState.PARTIALLY_DELIVERED,
        OrderState.DELIVERED,
        OrderState.MODIFYING,
        OrderState.CANCELLED,
    ],
    OrderState.PARTIALLY_DELIVERED: [
        OrderState.DELIVERED,
        OrderState.MODIFYING,
        OrderState.CANCELLED,
    ],
    OrderState.DELIVERED: [],
    OrderState.MODIFYING: [
        OrderState.ARRANGING_PAYMENT,
        OrderState.ARRANGING_ADDITIONAL_PAYMENT,
        OrderState.PAYMENT_AUTHORIZED,
        OrderState.PAYMENT_SETTLED,
        OrderState.PARTIALLY_SHIPPED,
        OrderState.SHIPPED,
        OrderState.PARTIALLY_DELIVERED,
    ],
    OrderState.ARRANGING_ADDITIONAL_PAYMENT: [
        OrderState.ARRANGING_PAYMENT,
        OrderState.PAYMENT_AUTHORIZED,
        OrderState.PAYMENT_SETTLED,
        OrderState.PARTIALLY_SHIPPED,
        OrderState.SHIPPED,
        OrderState.PARTIALLY_DELIVERED,
        OrderState.CANCELLED,
    ],
    OrderState.CANCELLED: [],
}


def can_transition(current: OrderState, target: OrderState) -> bool:
    """
    Check whether an order may move from `current` to `target`.

    Moving to the same state is not a transition and is rejected.
    """
    return target in ORDER_STATE_TRANSITIONS.get(current, [])


def allowed_next_states(current: OrderState) -> List[OrderState]:
    return list(ORDER_STATE_TRANSITIONS.get(current, []))


def transition_error_message(current: OrderState, target: OrderState) -> str:
    return f"Cannot transition Order from {current.value} to {target.value}"
