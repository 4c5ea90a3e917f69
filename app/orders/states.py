"""
State enums for order and payment models.

These are Django TextChoices for database storage and admin integration.

Payment States:
    checkout → processing → pending → completed
    checkout/processing/pending → failed
    checkout/processing/pending/completed → void
    failed → pending (recovery of orders whose checkout settled)

Shipment States:
    pending → ready (once completed payments cover the order total)
"""

from django.db import models


class PaymentState(models.TextChoices):
    """
    States for the Payment model lifecycle.

    Terminal states: VOID. COMPLETED and FAILED only move through
    explicit transitions (void, reopen).
    """

    CHECKOUT = "checkout", "Checkout"
    PROCESSING = "processing", "Processing"
    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"
    VOID = "void", "Void"


class ShipmentState(models.TextChoices):
    """Shipment readiness derived from the order's completed payments."""

    PENDING = "pending", "Pending"
    READY = "ready", "Ready"


__all__ = [
    "PaymentState",
    "ShipmentState",
]
