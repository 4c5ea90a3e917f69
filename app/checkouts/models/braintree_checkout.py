"""
BraintreeCheckout model.

A BraintreeCheckout is the local record of a Braintree transaction used as
a payment source. Its state mirrors the gateway's transaction status and is
refreshed by the state sync job; once it reaches a final state it never
changes again.

Usage:
    from checkouts.models import BraintreeCheckout

    # Non-final checkouts with a gateway transaction to look up
    BraintreeCheckout.objects.pending_sync()

    # Recent settled PayPal checkouts (recovery candidates)
    BraintreeCheckout.objects.recent_with_paypal(now=timezone.now(), window=timedelta(days=2))
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.core.exceptions import ObjectDoesNotExist
from django.db import models

from core.managers import BaseQuerySet
from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel
from orders.states import PaymentState

from checkouts.exceptions import CheckoutImmutableError
from checkouts.state_machines import FINAL_STATES, CheckoutState, OperatorAction

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime, timedelta
    from decimal import Decimal

    from orders.models import Order, Payment

    from checkouts.adapters import BraintreeAdapter, TransactionResult


class CheckoutQuerySet(BaseQuerySet):
    """
    QuerySet for BraintreeCheckout with reconciliation filters.

    Every filter takes its parameters explicitly; none of them reads the
    clock or settings on its own.
    """

    def in_states(self, states: Iterable[str]) -> CheckoutQuerySet:
        """Checkouts whose state is one of ``states``."""
        return self.filter(state__in=list(states))

    def not_in_states(self, states: Iterable[str]) -> CheckoutQuerySet:
        """Checkouts whose state is none of ``states``."""
        return self.exclude(state__in=list(states))

    def pending_sync(self) -> CheckoutQuerySet:
        """
        Checkouts the state sync job should look up on the gateway.

        Non-final checkouts that already carry a gateway transaction id.
        """
        return self.not_in_states(FINAL_STATES).exclude(transaction_id="")

    def recent_with_paypal(self, now: datetime, window: timedelta) -> CheckoutQuerySet:
        """
        Settled PayPal checkouts created within ``window`` before ``now``.

        Args:
            now: Upper bound of the creation window (inclusive)
            window: Length of the creation window

        Returns:
            Filtered queryset of recovery candidates
        """
        return (
            self.created_between(now - window, now)
            .in_states([CheckoutState.SETTLED])
            .filter(paypal_email__isnull=False)
        )


class BraintreeCheckout(UUIDPrimaryKeyMixin, BaseModel):
    """
    Local mirror of a Braintree transaction.

    Fields:
        state: Braintree transaction status (see CheckoutState)
        transaction_id: Braintree transaction id (immutable once set)
        paypal_email: Payer email for PayPal-funded checkouts
        braintree_card_type: Normalized card brand (see map_card_type)
        braintree_last_digits: Last digits of the card

    Relations:
        payment: Payment whose source is this checkout (reverse one-to-one)

    Invariants:
        - A checkout in FINAL_STATES never changes state again
        - transaction_id cannot be reassigned once set
    """

    state = models.CharField(
        max_length=32,
        choices=CheckoutState.choices,
        default=CheckoutState.AUTHORIZING,
        db_index=True,
        help_text="Braintree transaction status",
    )

    transaction_id = models.CharField(
        max_length=64,
        blank=True,
        default="",
        db_index=True,
        help_text="Braintree transaction id",
    )

    paypal_email = models.EmailField(
        null=True,
        blank=True,
        help_text="Payer email for PayPal checkouts",
    )

    braintree_card_type = models.CharField(
        max_length=32,
        blank=True,
        default="",
        help_text="Normalized card brand (e.g., visa, master, american_express)",
    )

    braintree_last_digits = models.CharField(
        max_length=4,
        blank=True,
        default="",
        help_text="Last digits of the card number",
    )

    objects = CheckoutQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Braintree Checkout"
        verbose_name_plural = "Braintree Checkouts"
        indexes = [
            models.Index(fields=["state", "created_at"], name="checkout_state_created_idx"),
        ]

    def __str__(self) -> str:
        """Return string representation with state and transaction id."""
        return f"BraintreeCheckout({self.id}, {self.state}, {self.transaction_id or '-'})"

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        # Remember the stored transaction id so save() can refuse reassignment
        instance._stored_transaction_id = instance.__dict__.get("transaction_id", "")
        return instance

    def save(self, *args, **kwargs):
        stored = getattr(self, "_stored_transaction_id", "")
        if stored and self.transaction_id != stored:
            raise CheckoutImmutableError(
                "Checkout transaction id cannot be reassigned",
                details={
                    "checkout_id": str(self.id),
                    "transaction_id": stored,
                    "attempted": self.transaction_id,
                },
            )
        super().save(*args, **kwargs)
        self._stored_transaction_id = self.transaction_id

    # ==========================================================================
    # State
    # ==========================================================================

    @property
    def is_final(self) -> bool:
        """Whether the checkout reached a terminal gateway status."""
        return self.state in FINAL_STATES

    def apply_gateway_status(self, status: str) -> bool:
        """
        Copy a gateway status onto the checkout (not saved).

        Args:
            status: Transaction status reported by Braintree

        Returns:
            True if the state changed

        Raises:
            CheckoutImmutableError: If the checkout is final and the
                status differs from its current state
        """
        if status == self.state:
            return False

        if self.is_final:
            raise CheckoutImmutableError(
                "Checkout is in a final state",
                details={
                    "checkout_id": str(self.id),
                    "state": self.state,
                    "gateway_status": status,
                },
            )

        self.state = status
        return True

    # ==========================================================================
    # Relations
    # ==========================================================================

    @property
    def linked_payment(self) -> Payment | None:
        """Payment funded by this checkout, or None."""
        try:
            return self.payment
        except ObjectDoesNotExist:
            return None

    @property
    def order(self) -> Order | None:
        """Order reached through the linked payment, or None."""
        payment = self.linked_payment
        return payment.order if payment is not None else None

    def is_failed_order_with_settled_checkout(self) -> bool:
        """Settled locally while the linked payment is marked failed."""
        payment = self.linked_payment
        return (
            payment is not None
            and payment.state == PaymentState.FAILED
            and self.state == CheckoutState.SETTLED
        )

    # ==========================================================================
    # Operator Guards (advisory)
    # ==========================================================================

    def actions(self) -> list[str]:
        """Gateway operations an operator may issue against a checkout."""
        return [OperatorAction.VOID, OperatorAction.SETTLE, OperatorAction.CREDIT]

    def can_void(self) -> bool:
        return self.state in (
            CheckoutState.AUTHORIZED,
            CheckoutState.SUBMITTED_FOR_SETTLEMENT,
        )

    def can_settle(self) -> bool:
        return self.state == CheckoutState.AUTHORIZED

    def can_credit(self) -> bool:
        return self.state in (CheckoutState.SETTLED, CheckoutState.SETTLING)

    # ==========================================================================
    # Gateway Lookups
    # ==========================================================================

    def fetch_gateway_transaction(self, adapter: BraintreeAdapter) -> TransactionResult:
        """
        Look up this checkout's transaction on Braintree.

        Raises:
            GatewayError: If the lookup fails
        """
        return adapter.find_transaction(self.transaction_id)

    def fetch_gateway_status(self, adapter: BraintreeAdapter) -> str:
        return self.fetch_gateway_transaction(adapter).status

    def fetch_gateway_amount(self, adapter: BraintreeAdapter) -> Decimal:
        return self.fetch_gateway_transaction(adapter).amount
