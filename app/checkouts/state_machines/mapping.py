"""
Lookup tables between Braintree vocabulary and local payment vocabulary.

Every table is a finite dict; anything not listed goes through an explicit
default (lower-casing for card brands, ``failure`` for statuses). Unknown
gateway statuses are therefore never left pending.

Usage:
    from checkouts.state_machines.mapping import (
        map_card_type,
        payment_action_for_checkout_state,
    )

    map_card_type("MasterCard")                 # "master"
    payment_action_for_checkout_state("settled")  # PaymentAction.COMPLETE
"""

from __future__ import annotations

from orders.states import PaymentState

from checkouts.state_machines.states import CheckoutState, PaymentAction

CARD_TYPE_LABELS: dict[str, str] = {
    "AmericanExpress": "american_express",
    "Diners Club": "diners_club",
    "MasterCard": "master",
}

PAYMENT_STATUS_ACTIONS: dict[str, PaymentAction] = {
    PaymentState.PENDING: PaymentAction.PEND,
    PaymentState.VOID: PaymentAction.VOID,
    PaymentState.COMPLETED: PaymentAction.COMPLETE,
}

CHECKOUT_PAYMENT_STATES: dict[str, PaymentState] = {
    CheckoutState.AUTHORIZING: PaymentState.PENDING,
    CheckoutState.AUTHORIZED: PaymentState.PENDING,
    CheckoutState.SUBMITTED_FOR_SETTLEMENT: PaymentState.PENDING,
    CheckoutState.SETTLING: PaymentState.PENDING,
    CheckoutState.SETTLEMENT_PENDING: PaymentState.PENDING,
    CheckoutState.SETTLEMENT_CONFIRMED: PaymentState.PENDING,
    CheckoutState.SETTLED: PaymentState.COMPLETED,
    CheckoutState.RELEASED: PaymentState.COMPLETED,
    CheckoutState.VOIDED: PaymentState.VOID,
    CheckoutState.AUTHORIZATION_EXPIRED: PaymentState.VOID,
    CheckoutState.REFUNDED: PaymentState.VOID,
}


def map_card_type(card_type: str | None) -> str:
    """
    Normalize a Braintree card brand label.

    Args:
        card_type: Brand label as reported by Braintree (may be None)

    Returns:
        Normalized label, or "" when no label was given
    """
    if not card_type:
        return ""
    if card_type in CARD_TYPE_LABELS:
        return CARD_TYPE_LABELS[card_type]
    return card_type.lower()


def map_status_to_action(status: str | None) -> PaymentAction:
    """
    Map a payment status to the Payment transition that reaches it.

    Args:
        status: Payment status name (pending, void, completed, ...)

    Returns:
        The matching PaymentAction; FAILURE for anything else
    """
    if status in PAYMENT_STATUS_ACTIONS:
        return PAYMENT_STATUS_ACTIONS[status]
    return PaymentAction.FAILURE


def map_checkout_state_to_payment_state(checkout_state: str | None) -> PaymentState:
    """
    Map a checkout (Braintree) state to the payment state it implies.

    Declines, rejections and unrecognized states all map to FAILED.
    """
    if checkout_state in CHECKOUT_PAYMENT_STATES:
        return CHECKOUT_PAYMENT_STATES[checkout_state]
    return PaymentState.FAILED


def payment_action_for_checkout_state(checkout_state: str | None) -> PaymentAction:
    """Two-stage mapping: checkout state -> payment state -> action."""
    return map_status_to_action(map_checkout_state_to_payment_state(checkout_state))


__all__ = [
    "CARD_TYPE_LABELS",
    "CHECKOUT_PAYMENT_STATES",
    "PAYMENT_STATUS_ACTIONS",
    "map_card_type",
    "map_checkout_state_to_payment_state",
    "map_status_to_action",
    "payment_action_for_checkout_state",
]
