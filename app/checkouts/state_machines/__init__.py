"""
State enums and mapping tables for Braintree checkouts.
"""

from checkouts.state_machines.mapping import (
    map_card_type,
    map_checkout_state_to_payment_state,
    map_status_to_action,
    payment_action_for_checkout_state,
)
from checkouts.state_machines.states import (
    FINAL_STATES,
    CheckoutState,
    OperatorAction,
    PaymentAction,
)

__all__ = [
    "CheckoutState",
    "FINAL_STATES",
    "OperatorAction",
    "PaymentAction",
    "map_card_type",
    "map_checkout_state_to_payment_state",
    "map_status_to_action",
    "payment_action_for_checkout_state",
]
