"""
Shipment resynchronization after payment transitions.

Shipments are released once the order's completed payments cover its
total. Anything short of that keeps shipments pending.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from django.db.models import Sum

from core.services import BaseService

from orders.states import PaymentState, ShipmentState

if TYPE_CHECKING:
    from orders.models import Order


class ShipmentSyncService(BaseService):
    """Recompute an order's shipment state from its payments."""

    @classmethod
    def resync(cls, order: Order) -> str:
        """
        Recompute and persist the order's shipment state.

        Errors are not caught here; callers log them against the record
        that triggered the resync.

        Args:
            order: Order whose shipments should be resynchronized

        Returns:
            The new shipment state
        """
        paid = order.payments.filter(state=PaymentState.COMPLETED).aggregate(
            paid=Sum("amount")
        )["paid"] or Decimal("0")

        new_state = (
            ShipmentState.READY if paid >= order.total else ShipmentState.PENDING
        )

        if order.shipment_state != new_state:
            previous_state = order.shipment_state
            order.shipment_state = new_state
            order.save(update_fields=["shipment_state", "updated_at"])
            cls.get_logger().info(
                "Order shipment state changed",
                extra={
                    "order_id": str(order.id),
                    "from_state": previous_state,
                    "to_state": new_state,
                    "paid": str(paid),
                },
            )

        return new_state
