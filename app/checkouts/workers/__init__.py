"""
Celery workers for checkout reconciliation.

Usage:
    from checkouts.workers import refresh_single_checkout, update_checkout_states

    update_checkout_states.delay()
    refresh_single_checkout.delay(str(checkout_id))
"""

from checkouts.workers.reconciliation_worker import (
    refresh_single_checkout,
    update_checkout_states,
)

__all__ = [
    "refresh_single_checkout",
    "update_checkout_states",
]
