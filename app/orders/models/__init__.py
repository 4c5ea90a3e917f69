"""
Order domain models.

- Order: Order total and shipment readiness
- Payment: Payment lifecycle funded by a BraintreeCheckout source
"""

from orders.models.order import Order
from orders.models.payment import Payment

__all__ = [
    "Order",
    "Payment",
]
