"""
Tests for the BraintreeCheckout model.

These tests verify that:
- Queryset filters select by state, creation window and PayPal email
- Final checkouts refuse state changes
- transaction_id cannot be reassigned
- Operator guards follow the checkout state
- Gateway fetch helpers go through the adapter
"""

from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.utils import timezone
from freezegun import freeze_time

from orders.states import PaymentState
from orders.tests.factories import PaymentFactory

from checkouts.adapters import TransactionResult
from checkouts.exceptions import CheckoutImmutableError
from checkouts.models import BraintreeCheckout
from checkouts.state_machines import FINAL_STATES, CheckoutState
from checkouts.tests.factories import BraintreeCheckoutFactory


@pytest.mark.django_db
class TestCheckoutQuerySet:
    """Tests for CheckoutQuerySet filters."""

    def test_in_states_and_not_in_states(self):
        authorized = BraintreeCheckoutFactory(state=CheckoutState.AUTHORIZED)
        settled = BraintreeCheckoutFactory(state=CheckoutState.SETTLED)

        assert list(BraintreeCheckout.objects.in_states([CheckoutState.SETTLED])) == [settled]
        assert list(BraintreeCheckout.objects.not_in_states(FINAL_STATES)) == [authorized]

    def test_pending_sync_excludes_final_and_blank_transaction(self):
        authorized = BraintreeCheckoutFactory(state=CheckoutState.AUTHORIZED)
        BraintreeCheckoutFactory(state=CheckoutState.VOIDED)
        BraintreeCheckoutFactory(state=CheckoutState.AUTHORIZING, transaction_id="")

        assert list(BraintreeCheckout.objects.pending_sync()) == [authorized]

    def test_recent_with_paypal(self):
        now = timezone.now()
        window = timedelta(days=2)

        recent = BraintreeCheckoutFactory(paypal=True, state=CheckoutState.SETTLED)
        # Card checkout, not PayPal
        BraintreeCheckoutFactory(state=CheckoutState.SETTLED)
        # PayPal, but not settled
        BraintreeCheckoutFactory(paypal=True, state=CheckoutState.SETTLING)
        old = BraintreeCheckoutFactory(paypal=True, state=CheckoutState.SETTLED)
        BraintreeCheckout.objects.filter(pk=old.pk).update(created_at=now - timedelta(days=3))

        result = BraintreeCheckout.objects.recent_with_paypal(now=now, window=window)

        assert list(result) == [recent]

    def test_recent_with_paypal_window_is_explicit(self):
        with freeze_time("2024-03-10 12:00:00"):
            checkout = BraintreeCheckoutFactory(paypal=True, state=CheckoutState.SETTLED)

        later = datetime(2024, 3, 12, 11, 0, tzinfo=dt_timezone.utc)
        much_later = datetime(2024, 3, 13, 12, 0, tzinfo=dt_timezone.utc)

        assert checkout in BraintreeCheckout.objects.recent_with_paypal(
            now=later, window=timedelta(days=2)
        )
        assert checkout not in BraintreeCheckout.objects.recent_with_paypal(
            now=much_later, window=timedelta(days=2)
        )


@pytest.mark.django_db
class TestApplyGatewayStatus:
    """Tests for BraintreeCheckout.apply_gateway_status."""

    def test_changes_non_final_state(self, authorized_checkout):
        assert authorized_checkout.apply_gateway_status(CheckoutState.SETTLED) is True
        assert authorized_checkout.state == CheckoutState.SETTLED

    def test_same_status_is_not_a_change(self, authorized_checkout):
        assert authorized_checkout.apply_gateway_status(CheckoutState.AUTHORIZED) is False

    @pytest.mark.parametrize("final_state", sorted(FINAL_STATES))
    def test_final_state_refuses_change(self, final_state):
        checkout = BraintreeCheckoutFactory(state=final_state)
        with pytest.raises(CheckoutImmutableError):
            checkout.apply_gateway_status(CheckoutState.AUTHORIZED)

        assert checkout.state == final_state

    def test_final_state_same_status_is_noop(self, settled_checkout):
        assert settled_checkout.apply_gateway_status(CheckoutState.SETTLED) is False


@pytest.mark.django_db
class TestTransactionIdImmutability:
    """Tests for transaction_id reassignment."""

    def test_first_assignment_allowed(self):
        checkout = BraintreeCheckoutFactory(transaction_id="")
        checkout.transaction_id = "abc123"
        checkout.save()

        checkout.refresh_from_db()
        assert checkout.transaction_id == "abc123"

    def test_reassignment_raises(self, authorized_checkout):
        checkout = BraintreeCheckout.objects.get(pk=authorized_checkout.pk)
        checkout.transaction_id = "different"

        with pytest.raises(CheckoutImmutableError):
            checkout.save()

    def test_reassignment_on_new_instance_raises(self):
        checkout = BraintreeCheckoutFactory(transaction_id="first")
        checkout.transaction_id = "second"

        with pytest.raises(CheckoutImmutableError):
            checkout.save()


@pytest.mark.django_db
class TestOperatorGuards:
    """Tests for can_void / can_settle / can_credit / actions."""

    def test_actions(self, authorized_checkout):
        assert authorized_checkout.actions() == ["void", "settle", "credit"]

    @pytest.mark.parametrize(
        "state,can_void,can_settle,can_credit",
        [
            (CheckoutState.AUTHORIZED, True, True, False),
            (CheckoutState.SUBMITTED_FOR_SETTLEMENT, True, False, False),
            (CheckoutState.SETTLING, False, False, True),
            (CheckoutState.SETTLED, False, False, True),
            (CheckoutState.VOIDED, False, False, False),
            (CheckoutState.AUTHORIZING, False, False, False),
        ],
    )
    def test_guards(self, state, can_void, can_settle, can_credit):
        checkout = BraintreeCheckoutFactory(state=state)

        assert checkout.can_void() is can_void
        assert checkout.can_settle() is can_settle
        assert checkout.can_credit() is can_credit


@pytest.mark.django_db
class TestRelations:
    """Tests for payment/order access through the checkout."""

    def test_without_payment(self, authorized_checkout):
        assert authorized_checkout.linked_payment is None
        assert authorized_checkout.order is None
        assert authorized_checkout.is_failed_order_with_settled_checkout() is False

    def test_linked_payment_and_order(self, pending_payment, authorized_checkout, order):
        checkout = BraintreeCheckout.objects.get(pk=authorized_checkout.pk)

        assert checkout.linked_payment == pending_payment
        assert checkout.order == order

    def test_failed_order_with_settled_checkout(self, failed_paypal_payment, settled_paypal_checkout):
        checkout = BraintreeCheckout.objects.get(pk=settled_paypal_checkout.pk)
        assert checkout.is_failed_order_with_settled_checkout() is True

    def test_completed_payment_is_not_failed_order(self, order):
        checkout = BraintreeCheckoutFactory(paypal=True, state=CheckoutState.SETTLED)
        PaymentFactory(order=order, source=checkout, state=PaymentState.COMPLETED)

        checkout = BraintreeCheckout.objects.get(pk=checkout.pk)
        assert checkout.is_failed_order_with_settled_checkout() is False


@pytest.mark.django_db
class TestGatewayLookups:
    """Tests for the fetch_gateway_* helpers."""

    def test_fetch_helpers_use_adapter(self, authorized_checkout):
        adapter = MagicMock()
        adapter.find_transaction.return_value = TransactionResult(
            id=authorized_checkout.transaction_id,
            status="settling",
            amount=Decimal("42.00"),
        )

        assert authorized_checkout.fetch_gateway_status(adapter) == "settling"
        assert authorized_checkout.fetch_gateway_amount(adapter) == Decimal("42.00")
        adapter.find_transaction.assert_called_with(authorized_checkout.transaction_id)
