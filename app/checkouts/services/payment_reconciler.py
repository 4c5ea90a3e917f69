"""
Payment reconciliation after a persisted checkout state change.

The state sync service calls PaymentStateReconciler.reconcile() right after
saving a checkout whose state changed, inside the same database
transaction. The checkout state is mapped to a payment state, the payment
state to a Payment transition, and that transition is applied once.

Usage:
    with transaction.atomic():
        previous_state = checkout.state
        checkout.apply_gateway_status(status)
        checkout.save(update_fields=["state", "updated_at"])
        PaymentStateReconciler.reconcile(checkout, previous_state)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django_fsm import can_proceed

from core.services import BaseService

from checkouts.state_machines import PaymentAction, payment_action_for_checkout_state

if TYPE_CHECKING:
    from checkouts.models import BraintreeCheckout


class PaymentStateReconciler(BaseService):
    """
    Applies the Payment transition implied by a checkout state change.

    Each observed checkout state change leads to at most one Payment
    transition. It can be zero: a transition the Payment FSM does not allow
    from its current state (e.g. pend on a payment that is already pending,
    when a checkout moves from authorized to submitted_for_settlement) is
    skipped and logged at warning level, and never retried for the same
    change. The checkout state change itself is kept.
    """

    @classmethod
    def reconcile(
        cls,
        checkout: BraintreeCheckout,
        previous_state: str,
    ) -> PaymentAction | None:
        """
        Apply the payment action for the checkout's new state.

        Args:
            checkout: Checkout whose new state was just saved
            previous_state: Checkout state before the change

        Returns:
            The applied PaymentAction, or None when nothing was applied
            (state unchanged, no linked payment, or transition not allowed)
        """
        if previous_state == checkout.state:
            return None

        payment = checkout.linked_payment
        if payment is None:
            return None

        logger = cls.get_logger()
        action = payment_action_for_checkout_state(checkout.state)
        transition_method = getattr(payment, action.value)

        log_context = {
            "checkout_id": str(checkout.id),
            "payment_id": payment.pk,
            "previous_state": previous_state,
            "checkout_state": checkout.state,
            "payment_state": payment.state,
            "action": action.value,
        }

        if not can_proceed(transition_method):
            logger.warning(
                "Payment transition not allowed, skipping",
                extra=log_context,
            )
            return None

        transition_method()
        payment.save(update_fields=["state", "updated_at"])

        logger.info(
            "Applied payment action for checkout state change",
            extra={**log_context, "payment_state": payment.state},
        )
        return action


__all__ = ["PaymentStateReconciler"]
