"""
Order model.

An Order owns a collection of Payments. Its total is one of the three
amounts that must agree before a recovered payment is completed, and its
shipment state is resynchronized after payment transitions.
"""

from __future__ import annotations

from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

from orders.states import ShipmentState


class Order(UUIDPrimaryKeyMixin, BaseModel):
    """
    Customer order funded by one or more payments.

    Fields:
        number: Human-readable order number
        total: Order total in major currency units
        currency: ISO 4217 currency code
        shipment_state: Whether shipments may be released
    """

    number = models.CharField(
        max_length=32,
        unique=True,
        help_text="Human-readable order number (e.g., R123456789)",
    )

    total = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Order total in major currency units",
    )

    currency = models.CharField(
        max_length=3,
        default="USD",
        help_text="ISO 4217 currency code",
    )

    shipment_state = models.CharField(
        max_length=20,
        choices=ShipmentState.choices,
        default=ShipmentState.PENDING,
        help_text="Shipment readiness derived from completed payments",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Order"
        verbose_name_plural = "Orders"

    def __str__(self) -> str:
        """Return string representation with number and total."""
        return f"Order({self.number}, {self.total} {self.currency})"

    def sync_shipments(self) -> str:
        """
        Resynchronize shipment state with the order's payments.

        Returns:
            The resulting shipment state
        """
        from orders.services import ShipmentSyncService

        return ShipmentSyncService.resync(self)
