"""
Celery tasks for checkout reconciliation.

The tasks are defined in checkouts.workers and re-exported here so that
Celery autodiscover finds them.

Usage:
    from checkouts.tasks import update_checkout_states

    update_checkout_states.delay()
"""

from checkouts.workers import (  # noqa: F401
    refresh_single_checkout,
    update_checkout_states,
)

__all__ = [
    "refresh_single_checkout",
    "update_checkout_states",
]
