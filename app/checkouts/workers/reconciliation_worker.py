"""
Celery tasks for syncing checkout state with Braintree.

Tasks:
- update_checkout_states: Periodic task that runs a full state sync
- refresh_single_checkout: On-demand refresh of one checkout

Usage:
    # Typically called via celery-beat schedule (see migration
    # 0002_add_state_sync_schedule)
    from checkouts.workers import update_checkout_states

    update_checkout_states.delay()

    # Refresh a specific checkout
    refresh_single_checkout.delay(str(checkout_id))
"""

from __future__ import annotations

import logging
from uuid import UUID

from celery import shared_task

from checkouts.exceptions import StateSyncLockError

logger = logging.getLogger(__name__)


# =============================================================================
# Periodic Task: Full State Sync
# =============================================================================


@shared_task(bind=True)
def update_checkout_states(self) -> dict:
    """
    Sync every non-final checkout with Braintree.

    The task:
    1. Acquires the run lock to prevent concurrent runs
    2. Refreshes each non-final checkout from Braintree
    3. Applies payment transitions for changed checkouts
    4. Recovers failed orders whose PayPal checkout settled

    Returns:
        Dict with:
        - status: "completed", "skipped" (lock held), or "failed"
        - changed: Checkouts whose state changed
        - unchanged: Checkouts already in sync
        - failed: Checkouts that could not be refreshed
        - recovered: Failed payments reopened by recovery
        - error: Error message if failed

    Note:
        If another run is in progress, this task returns immediately
        with status "skipped" rather than waiting.
    """
    from checkouts.services import CheckoutStateSyncService

    logger.info(
        "Starting scheduled checkout state sync",
        extra={"task_id": self.request.id},
    )

    try:
        result = CheckoutStateSyncService.run_state_sync()

        return {
            "status": "completed",
            **result.to_dict(),
        }

    except StateSyncLockError:
        # Another run is in progress - this is expected and OK
        logger.info(
            "Checkout state sync skipped - another run in progress",
            extra={"task_id": self.request.id},
        )
        return {
            "status": "skipped",
            "reason": "Another checkout state sync run is in progress",
        }

    except Exception as e:
        logger.exception(
            f"Unexpected error during checkout state sync: {e}",
            extra={"error": str(e)},
        )
        return {
            "status": "failed",
            "error": str(e),
            "error_code": "UNEXPECTED_ERROR",
        }


# =============================================================================
# On-Demand Task: Single Checkout
# =============================================================================


@shared_task(bind=True)
def refresh_single_checkout(self, checkout_id: str) -> dict:
    """
    Refresh a single checkout against Braintree.

    Args:
        checkout_id: UUID of the BraintreeCheckout to refresh

    Returns:
        Dict with:
        - status: "changed", "unchanged", "locked", "final",
          "not_found" or "failed"
        - checkout_id: The ID processed
        - state: Checkout state after the refresh
        - payment_action: Payment transition applied, if any
        - error: Error message if failed
    """
    from checkouts.services import CheckoutStateSyncService

    logger.info(
        "Refreshing single checkout",
        extra={"checkout_id": checkout_id},
    )

    # Convert string ID to UUID
    try:
        checkout_uuid = UUID(checkout_id)
    except ValueError:
        logger.error(f"Invalid checkout_id format: {checkout_id}")
        return {
            "status": "failed",
            "checkout_id": checkout_id,
            "error": "Invalid UUID format",
        }

    try:
        result = CheckoutStateSyncService.refresh_checkout(checkout_uuid)

        if not result.success:
            return {
                "status": "not_found"
                if result.error_code == "CHECKOUT_NOT_FOUND"
                else "failed",
                "checkout_id": checkout_id,
                "error": result.error,
                "error_code": result.error_code,
            }

        refresh = result.data
        return {
            "status": refresh.outcome.value,
            "checkout_id": checkout_id,
            "state": refresh.state,
            "payment_action": refresh.payment_action,
        }

    except Exception as e:
        logger.exception(
            f"Error refreshing checkout: {e}",
            extra={"checkout_id": checkout_id},
        )
        return {
            "status": "failed",
            "checkout_id": checkout_id,
            "error": str(e),
            "error_code": "UNEXPECTED_ERROR",
        }
