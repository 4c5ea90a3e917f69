"""
Recovery of orders that failed locally but settled on Braintree.

Some PayPal checkouts take long enough to authorize that the order's payment
is marked failed before Braintree settles the transaction. This service
scans recent settled PayPal checkouts and repairs their failed payments:

1. The checkout must be settled and its linked payment failed
2. Braintree must still report the transaction as settled
3. The checkout's own failed payment is reopened to pending
4. It is completed only if the order total, the payment amount and the
   gateway amount are all equal
5. The order's shipments are resynchronized

Usage:
    from checkouts.services import FailedOrderRecoveryService

    result = FailedOrderRecoveryService.recover_recent(adapter)
    print(f"Reopened {result.reopened}, completed {result.completed}")
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from django.conf import settings
from django.utils import timezone

from core.services import BaseService
from orders.states import PaymentState

from checkouts.exceptions import GatewayUnavailableError
from checkouts.models import BraintreeCheckout
from checkouts.state_machines import CheckoutState

if TYPE_CHECKING:
    from datetime import datetime
    from decimal import Decimal

    from checkouts.adapters import BraintreeAdapter


DEFAULT_RECOVERY_WINDOW_DAYS = 2


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class RecoveryOutcome:
    """Result of examining one recovery candidate."""

    checkout_id: uuid.UUID
    order_id: uuid.UUID
    gateway_status: str
    gateway_amount: Decimal
    payment_state: str | None
    shipment_state: str


@dataclass
class RecoveryResult:
    """Summary of a recovery pass."""

    examined: int = 0
    reopened: int = 0
    completed: int = 0
    failed: int = 0


# =============================================================================
# Recovery Service
# =============================================================================


class FailedOrderRecoveryService(BaseService):
    """
    Repairs failed payments whose Braintree checkout settled.

    Each candidate is handled independently; an error on one candidate is
    logged and counted without stopping the pass.
    """

    @classmethod
    def recovery_window(cls) -> timedelta:
        days = getattr(settings, "CHECKOUT_RECOVERY_WINDOW_DAYS", DEFAULT_RECOVERY_WINDOW_DAYS)
        return timedelta(days=days)

    @classmethod
    def candidates(cls, now: datetime | None = None):
        """Recent settled PayPal checkouts, with payments and orders loaded."""
        now = now or timezone.now()
        return BraintreeCheckout.objects.recent_with_paypal(
            now=now,
            window=cls.recovery_window(),
        ).select_related("payment__order")

    @classmethod
    def recover_recent(
        cls,
        adapter: BraintreeAdapter,
        now: datetime | None = None,
    ) -> RecoveryResult:
        """
        Run recovery over all current candidates.

        Args:
            adapter: Braintree adapter used to re-confirm transactions
            now: Upper bound of the candidate window (defaults to now)

        Returns:
            RecoveryResult with per-pass counts
        """
        logger = cls.get_logger()
        result = RecoveryResult()

        for checkout in cls.candidates(now=now):
            try:
                outcome = cls.recover_checkout(checkout, adapter)
                if outcome is None:
                    continue

                result.examined += 1
                if outcome.payment_state == PaymentState.PENDING:
                    result.reopened += 1
                elif outcome.payment_state == PaymentState.COMPLETED:
                    result.reopened += 1
                    result.completed += 1

            except GatewayUnavailableError as e:
                result.failed += 1
                logger.warning(
                    "Braintree unavailable during order recovery, skipping",
                    extra={
                        "checkout_id": str(checkout.id),
                        "error": str(e),
                    },
                )
                continue

            except Exception as e:
                result.failed += 1
                logger.error(
                    "Error recovering order for settled checkout",
                    extra={
                        "checkout_id": str(checkout.id),
                        "error": str(e),
                    },
                    exc_info=True,
                )
                continue

        if result.examined or result.failed:
            logger.info(
                "Failed order recovery completed",
                extra={
                    "examined": result.examined,
                    "reopened": result.reopened,
                    "completed": result.completed,
                    "failed": result.failed,
                },
            )
        return result

    @classmethod
    def recover_checkout(
        cls,
        checkout: BraintreeCheckout,
        adapter: BraintreeAdapter,
    ) -> RecoveryOutcome | None:
        """
        Repair the order funded by one settled checkout.

        Args:
            checkout: Recovery candidate
            adapter: Braintree adapter used to re-confirm the transaction

        Returns:
            RecoveryOutcome, or None if the checkout is not a failed order
            with a settled checkout

        Raises:
            GatewayError: If the Braintree lookup fails
            Exception: Errors from shipment resync propagate
        """
        if not checkout.is_failed_order_with_settled_checkout():
            return None

        logger = cls.get_logger()
        order = checkout.order
        linked_payment = checkout.linked_payment

        transaction = checkout.fetch_gateway_transaction(adapter)
        log_context = {
            "checkout_id": str(checkout.id),
            "order_id": str(order.id),
            "transaction_id": checkout.transaction_id,
            "gateway_status": transaction.status,
        }

        payment_state = None
        with cls.atomic():
            payment = (
                order.payments.select_for_update()
                .filter(pk=linked_payment.pk, state=PaymentState.FAILED)
                .first()
            )

            if payment is None:
                logger.info("Linked payment is no longer failed", extra=log_context)
            elif transaction.status != CheckoutState.SETTLED:
                payment_state = payment.state
                logger.warning(
                    "Checkout no longer settled on Braintree, leaving payment failed",
                    extra={**log_context, "payment_id": payment.pk},
                )
            else:
                payment.reopen()
                payment.save(update_fields=["state", "updated_at"])

                amounts = {order.total, payment.amount, transaction.amount}
                if len(amounts) == 1:
                    payment.complete()
                    payment.save(update_fields=["state", "updated_at"])
                else:
                    logger.warning(
                        "Amounts disagree, leaving recovered payment pending",
                        extra={
                            **log_context,
                            "payment_id": payment.pk,
                            "order_total": str(order.total),
                            "payment_amount": str(payment.amount),
                            "gateway_amount": str(transaction.amount),
                        },
                    )

                payment_state = payment.state
                logger.info(
                    "Recovered failed payment for settled checkout",
                    extra={
                        **log_context,
                        "payment_id": payment.pk,
                        "payment_state": payment_state,
                    },
                )

        shipment_state = order.sync_shipments()

        return RecoveryOutcome(
            checkout_id=checkout.id,
            order_id=order.id,
            gateway_status=transaction.status,
            gateway_amount=transaction.amount,
            payment_state=payment_state,
            shipment_state=shipment_state,
        )


__all__ = [
    "FailedOrderRecoveryService",
    "RecoveryOutcome",
    "RecoveryResult",
]
