"""
Tests for checkout reconciliation Celery tasks.

These tests verify:
- update_checkout_states reports run counts
- A held run lock makes the task skip instead of failing
- Unexpected errors are returned as a failed status
- refresh_single_checkout reports the refresh outcome
"""

import uuid
from decimal import Decimal

import pytest

from orders.states import PaymentState

from checkouts.exceptions import StateSyncLockError
from checkouts.state_machines import CheckoutState
from checkouts.tests.factories import BraintreeCheckoutFactory
from checkouts.workers import refresh_single_checkout, update_checkout_states


@pytest.mark.django_db
class TestUpdateCheckoutStates:
    """Tests for the periodic update_checkout_states task."""

    def test_completed_run_returns_counts(
        self, authorized_checkout, pending_payment, gateway, mock_redis_lock
    ):
        gateway.set_status(authorized_checkout.transaction_id, CheckoutState.SETTLED)

        result = update_checkout_states()

        assert result["status"] == "completed"
        assert result["changed"] == 1
        assert result["unchanged"] == 0
        assert result["failed"] == 0
        pending_payment.refresh_from_db()
        assert pending_payment.state == PaymentState.COMPLETED

    def test_lock_held_returns_skipped(self, authorized_checkout, gateway, mock_redis_lock):
        mock_redis_lock.set.return_value = False

        result = update_checkout_states()

        assert result["status"] == "skipped"
        gateway.adapter.find_transaction.assert_not_called()

    def test_unexpected_error_returns_failed(self, mocker):
        mocker.patch(
            "checkouts.services.CheckoutStateSyncService.run_state_sync",
            side_effect=RuntimeError("redis down"),
        )

        result = update_checkout_states()

        assert result["status"] == "failed"
        assert result["error_code"] == "UNEXPECTED_ERROR"
        assert "redis down" in result["error"]

    def test_lock_error_from_service_returns_skipped(self, mocker):
        mocker.patch(
            "checkouts.services.CheckoutStateSyncService.run_state_sync",
            side_effect=StateSyncLockError("held"),
        )

        assert update_checkout_states()["status"] == "skipped"


@pytest.mark.django_db
class TestRefreshSingleCheckout:
    """Tests for the on-demand refresh_single_checkout task."""

    def test_changed(self, authorized_checkout, pending_payment, gateway):
        gateway.set_status(
            authorized_checkout.transaction_id,
            CheckoutState.SETTLED,
            Decimal("100.00"),
        )

        result = refresh_single_checkout(str(authorized_checkout.id))

        assert result["status"] == "changed"
        assert result["checkout_id"] == str(authorized_checkout.id)
        assert result["state"] == CheckoutState.SETTLED
        assert result["payment_action"] == "complete"

    def test_unchanged(self, authorized_checkout, gateway):
        gateway.set_status(authorized_checkout.transaction_id, CheckoutState.AUTHORIZED)

        result = refresh_single_checkout(str(authorized_checkout.id))

        assert result["status"] == "unchanged"
        assert result["payment_action"] is None

    def test_final_checkout(self, settled_checkout, gateway):
        result = refresh_single_checkout(str(settled_checkout.id))

        assert result["status"] == "final"
        gateway.adapter.find_transaction.assert_not_called()

    def test_not_found(self, db, gateway):
        result = refresh_single_checkout(str(uuid.uuid4()))

        assert result["status"] == "not_found"
        assert result["error_code"] == "CHECKOUT_NOT_FOUND"

    def test_invalid_uuid(self, db):
        result = refresh_single_checkout("not-a-uuid")

        assert result["status"] == "failed"
        assert result["error"] == "Invalid UUID format"

    def test_gateway_error(self, gateway):
        checkout = BraintreeCheckoutFactory(state=CheckoutState.AUTHORIZED)

        result = refresh_single_checkout(str(checkout.id))

        assert result["status"] == "failed"
        assert result["error_code"] == "GATEWAY_NOT_FOUND"
