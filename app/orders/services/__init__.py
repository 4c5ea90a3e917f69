"""
Order services.

- ShipmentSyncService: Recomputes shipment readiness after payment changes
"""

from orders.services.shipment_sync import ShipmentSyncService

__all__ = [
    "ShipmentSyncService",
]
