"""
Pytest fixtures for checkout tests.

This module provides fixtures for checkouts in various states, linked
orders and payments, a mock Braintree adapter and a mock Redis connection
for the state sync run lock.

Usage:
    def test_settles(authorized_checkout, gateway, mock_redis_lock):
        gateway.set_status(authorized_checkout.transaction_id, "settled")
        CheckoutStateSyncService.update_states()
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from orders.states import PaymentState
from orders.tests.factories import OrderFactory, PaymentFactory

from checkouts.adapters import BraintreeAdapter, TransactionResult
from checkouts.exceptions import GatewayNotFoundError
from checkouts.services import CheckoutStateSyncService
from checkouts.state_machines import CheckoutState
from checkouts.tests.factories import BraintreeCheckoutFactory


# =============================================================================
# Mock Braintree Gateway
# =============================================================================


class FakeGateway:
    """
    In-memory Braintree transaction table behind a MagicMock adapter.

    Tests register transactions with set_status(); lookups of unknown ids
    raise GatewayNotFoundError like the real adapter.
    """

    def __init__(self) -> None:
        self.transactions: dict[str, TransactionResult] = {}
        self.adapter = MagicMock(spec=BraintreeAdapter)
        self.adapter.find_transaction.side_effect = self._find_transaction

    def set_status(
        self,
        transaction_id: str,
        status: str,
        amount: Decimal = Decimal("100.00"),
    ) -> None:
        self.transactions[transaction_id] = TransactionResult(
            id=transaction_id,
            status=status,
            amount=amount,
            currency="USD",
        )

    def _find_transaction(self, transaction_id: str) -> TransactionResult:
        if transaction_id not in self.transactions:
            raise GatewayNotFoundError(
                "Braintree resource not found",
                details={"transaction_id": transaction_id},
            )
        return self.transactions[transaction_id]


@pytest.fixture
def gateway():
    """
    Fake Braintree gateway injected into CheckoutStateSyncService.

    The adapter is reset after the test.
    """
    fake = FakeGateway()
    CheckoutStateSyncService.set_gateway_adapter(fake.adapter)
    try:
        yield fake
    finally:
        CheckoutStateSyncService.set_gateway_adapter(None)


@pytest.fixture
def mock_redis_lock(mocker):
    """Mock Redis for the state sync run lock."""
    mock_redis = mocker.MagicMock()
    mock_redis.set.return_value = True
    mock_redis.get.return_value = None
    mock_redis.delete.return_value = 1
    mock_redis.eval.return_value = 1

    mocker.patch(
        "checkouts.locks.get_redis_connection",
        return_value=mock_redis,
    )
    return mock_redis


# =============================================================================
# Checkout State Fixtures
# =============================================================================


@pytest.fixture
def authorized_checkout(db):
    """Create an AUTHORIZED card checkout."""
    return BraintreeCheckoutFactory(state=CheckoutState.AUTHORIZED)


@pytest.fixture
def settled_checkout(db):
    """Create a SETTLED (final) card checkout."""
    return BraintreeCheckoutFactory(state=CheckoutState.SETTLED)


@pytest.fixture
def settled_paypal_checkout(db):
    """Create a SETTLED PayPal checkout."""
    return BraintreeCheckoutFactory(paypal=True, state=CheckoutState.SETTLED)


# =============================================================================
# Order / Payment Fixtures
# =============================================================================


@pytest.fixture
def order(db):
    """Create a $100.00 order."""
    return OrderFactory(total=Decimal("100.00"))


@pytest.fixture
def pending_payment(order, authorized_checkout):
    """Create a PENDING payment funded by the authorized checkout."""
    return PaymentFactory(
        order=order,
        source=authorized_checkout,
        amount=Decimal("100.00"),
        state=PaymentState.PENDING,
    )


@pytest.fixture
def failed_paypal_payment(order, settled_paypal_checkout):
    """Create a FAILED payment funded by a settled PayPal checkout."""
    return PaymentFactory(
        order=order,
        source=settled_paypal_checkout,
        amount=Decimal("100.00"),
        state=PaymentState.FAILED,
    )
