"""
State enums for Braintree checkouts.

CheckoutState mirrors the Braintree transaction status vocabulary. A
checkout's state is copied from the gateway, so it is not an FSM: the
only rule is that FINAL_STATES are terminal.

Checkout States:
    authorizing → authorized → submitted_for_settlement → settling → settled
    authorized → voided / authorization_expired
    any non-final → processor_declined / gateway_rejected / failed
    settling → settlement_declined
    settlement_pending / settlement_confirmed (PayPal-funded settlements)

PaymentAction names the Payment transition applied after an observed
checkout state change.
"""

from django.db import models


class CheckoutState(models.TextChoices):
    """
    Braintree transaction statuses mirrored on BraintreeCheckout.

    Terminal states are listed in FINAL_STATES.
    """

    AUTHORIZING = "authorizing", "Authorizing"
    AUTHORIZED = "authorized", "Authorized"
    SUBMITTED_FOR_SETTLEMENT = "submitted_for_settlement", "Submitted For Settlement"
    SETTLING = "settling", "Settling"
    SETTLEMENT_PENDING = "settlement_pending", "Settlement Pending"
    SETTLEMENT_CONFIRMED = "settlement_confirmed", "Settlement Confirmed"
    AUTHORIZATION_EXPIRED = "authorization_expired", "Authorization Expired"
    PROCESSOR_DECLINED = "processor_declined", "Processor Declined"
    GATEWAY_REJECTED = "gateway_rejected", "Gateway Rejected"
    FAILED = "failed", "Failed"
    VOIDED = "voided", "Voided"
    SETTLED = "settled", "Settled"
    SETTLEMENT_DECLINED = "settlement_declined", "Settlement Declined"
    REFUNDED = "refunded", "Refunded"
    RELEASED = "released", "Released"


FINAL_STATES: frozenset[str] = frozenset(
    {
        CheckoutState.AUTHORIZATION_EXPIRED,
        CheckoutState.PROCESSOR_DECLINED,
        CheckoutState.GATEWAY_REJECTED,
        CheckoutState.FAILED,
        CheckoutState.VOIDED,
        CheckoutState.SETTLED,
        CheckoutState.SETTLEMENT_DECLINED,
        CheckoutState.REFUNDED,
        CheckoutState.RELEASED,
    }
)


class PaymentAction(models.TextChoices):
    """
    Payment transitions driven by checkout state changes.

    Values are the names of the Payment FSM transition methods.
    """

    PEND = "pend", "Pend"
    VOID = "void", "Void"
    COMPLETE = "complete", "Complete"
    FAILURE = "failure", "Failure"


class OperatorAction(models.TextChoices):
    """Gateway operations an operator may issue against a checkout."""

    VOID = "void", "Void"
    SETTLE = "settle", "Settle"
    CREDIT = "credit", "Credit"


__all__ = [
    "CheckoutState",
    "FINAL_STATES",
    "OperatorAction",
    "PaymentAction",
]
