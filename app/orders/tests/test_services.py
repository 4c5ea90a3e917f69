"""
Tests for ShipmentSyncService.

These tests verify that shipments are released only once completed
payments cover the order total, and fall back to pending otherwise.
"""

from decimal import Decimal

import pytest

from orders.services import ShipmentSyncService
from orders.states import PaymentState, ShipmentState
from orders.tests.factories import OrderFactory, PaymentFactory


@pytest.mark.django_db
class TestShipmentSyncService:
    """Tests for ShipmentSyncService.resync."""

    def test_no_payments_stays_pending(self):
        order = OrderFactory()

        assert ShipmentSyncService.resync(order) == ShipmentState.PENDING

    def test_completed_payment_covers_total(self):
        order = OrderFactory(total=Decimal("100.00"))
        PaymentFactory(order=order, state=PaymentState.COMPLETED)

        assert ShipmentSyncService.resync(order) == ShipmentState.READY

        order.refresh_from_db()
        assert order.shipment_state == ShipmentState.READY

    def test_split_payments_cover_total(self):
        order = OrderFactory(total=Decimal("100.00"))
        PaymentFactory(order=order, amount=Decimal("60.00"), state=PaymentState.COMPLETED)
        PaymentFactory(order=order, amount=Decimal("40.00"), state=PaymentState.COMPLETED)

        assert ShipmentSyncService.resync(order) == ShipmentState.READY

    def test_pending_payments_do_not_count(self):
        order = OrderFactory(total=Decimal("100.00"))
        PaymentFactory(order=order, state=PaymentState.PENDING)

        assert ShipmentSyncService.resync(order) == ShipmentState.PENDING

    def test_void_reverts_ready_order(self):
        order = OrderFactory(total=Decimal("100.00"), shipment_state=ShipmentState.READY)
        PaymentFactory(order=order, state=PaymentState.VOID)

        ShipmentSyncService.resync(order)

        order.refresh_from_db()
        assert order.shipment_state == ShipmentState.PENDING

    def test_order_sync_shipments_delegates(self, mocker):
        order = OrderFactory()
        resync = mocker.patch.object(
            ShipmentSyncService, "resync", return_value=ShipmentState.READY
        )

        assert order.sync_shipments() == ShipmentState.READY
        resync.assert_called_once_with(order)
