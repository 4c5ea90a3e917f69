"""
Payment model with django-fsm lifecycle.

A Payment belongs to an Order and is funded by a source. For Braintree
payments the source is a BraintreeCheckout; the reverse accessor
``checkout.payment`` is how the reconciliation engine reaches the payment.

Usage:
    from orders.models import Payment

    payment = checkout.payment
    payment.complete()
    payment.save()
"""

from __future__ import annotations

from django.db import models

from django_fsm import FSMField, transition

from core.models import BaseModel

from orders.states import PaymentState


class Payment(BaseModel):
    """
    Payment applied to an order.

    State Flow:
        CHECKOUT/PROCESSING -> PENDING -> COMPLETED
        CHECKOUT/PROCESSING/PENDING -> FAILED
        CHECKOUT/PROCESSING/PENDING/COMPLETED -> VOID

    Recovery Flow:
        FAILED -> PENDING (reopen)

    Fields:
        order: Order this payment applies to
        source: BraintreeCheckout funding this payment (optional)
        amount: Amount captured at authorization time
        state: Current FSM state
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="payments",
        help_text="Order this payment applies to",
    )

    source = models.OneToOneField(
        "checkouts.BraintreeCheckout",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="payment",
        help_text="Braintree checkout funding this payment",
    )

    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Amount captured at authorization time",
    )

    state = FSMField(
        default=PaymentState.CHECKOUT,
        choices=PaymentState.choices,
        db_index=True,
        help_text="Current state of the payment (managed by FSM)",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        indexes = [
            models.Index(fields=["order", "state"], name="payment_order_state_idx"),
        ]

    def __str__(self) -> str:
        """Return string representation with state and amount."""
        return f"Payment({self.pk}, {self.state}, {self.amount})"

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=state,
        source=[PaymentState.CHECKOUT, PaymentState.PROCESSING],
        target=PaymentState.PENDING,
    )
    def pend(self):
        """
        Mark the payment as authorized but not yet settled.

        Transition: CHECKOUT/PROCESSING -> PENDING
        """
        pass

    @transition(
        field=state,
        source=[
            PaymentState.CHECKOUT,
            PaymentState.PROCESSING,
            PaymentState.PENDING,
        ],
        target=PaymentState.COMPLETED,
    )
    def complete(self):
        """
        Mark the payment as settled.

        Transition: CHECKOUT/PROCESSING/PENDING -> COMPLETED
        """
        pass

    @transition(
        field=state,
        source=[
            PaymentState.CHECKOUT,
            PaymentState.PROCESSING,
            PaymentState.PENDING,
        ],
        target=PaymentState.FAILED,
    )
    def failure(self):
        """
        Mark the payment as failed.

        Transition: CHECKOUT/PROCESSING/PENDING -> FAILED
        """
        pass

    @transition(
        field=state,
        source=[
            PaymentState.CHECKOUT,
            PaymentState.PROCESSING,
            PaymentState.PENDING,
            PaymentState.COMPLETED,
        ],
        target=PaymentState.VOID,
    )
    def void(self):
        """
        Void the payment.

        Transition: CHECKOUT/PROCESSING/PENDING/COMPLETED -> VOID
        """
        pass

    @transition(
        field=state,
        source=PaymentState.FAILED,
        target=PaymentState.PENDING,
    )
    def reopen(self):
        """
        Reopen a failed payment whose funding checkout settled on the gateway.

        Transition: FAILED -> PENDING

        Only used by failed-order recovery, after the gateway re-confirms
        the transaction as settled.
        """
        pass
