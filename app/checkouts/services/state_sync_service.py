"""
Checkout state sync against Braintree.

This module provides the CheckoutStateSyncService which keeps local
BraintreeCheckout state in line with Braintree, the source of truth for
transaction status.

A sync run:
    1. Takes the run lock so only one run scans at a time
    2. Looks up every non-final checkout's transaction on Braintree
    3. Saves checkouts whose status changed and applies the matching
       Payment transition once, in the same database transaction
    4. Runs failed-order recovery over recent settled PayPal checkouts

Each checkout is processed in its own transaction after re-reading it with
select_for_update(skip_locked=True). A checkout locked by another worker,
or one that reached a final state since the scan began, is skipped. A
failure on one checkout is logged and counted and the scan moves on; the
checkout stays eligible for the next run.

Usage:
    from checkouts.services import CheckoutStateSyncService

    counts = CheckoutStateSyncService.update_states()
    # {"changed": 3, "unchanged": 41}

    result = CheckoutStateSyncService.refresh_checkout(checkout_id)
    if result.success:
        print(result.data.outcome)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone
from redis.exceptions import RedisError

from core.services import BaseService, ServiceResult

from checkouts.adapters import BraintreeAdapter
from checkouts.exceptions import (
    CheckoutPersistenceError,
    GatewayError,
    GatewayUnavailableError,
    StateSyncLockError,
)
from checkouts.locks import DistributedLock
from checkouts.models import BraintreeCheckout
from checkouts.services.payment_reconciler import PaymentStateReconciler
from checkouts.services.recovery_service import FailedOrderRecoveryService

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Constants
# =============================================================================

STATE_SYNC_LOCK_KEY = "checkouts:update_states"
STATE_SYNC_LOCK_TTL = 3600  # 1 hour


# =============================================================================
# Data Types
# =============================================================================


class RefreshOutcome(str, Enum):
    """What happened to one checkout during a refresh."""

    CHANGED = "changed"
    UNCHANGED = "unchanged"
    LOCKED = "locked"
    FINAL = "final"


@dataclass
class CheckoutRefreshResult:
    """Result of refreshing one checkout against Braintree."""

    checkout_id: uuid.UUID
    outcome: RefreshOutcome
    previous_state: str
    state: str
    payment_action: str | None = None

    @property
    def changed(self) -> bool:
        return self.outcome == RefreshOutcome.CHANGED


@dataclass
class StateSyncResult:
    """Summary of a state sync run."""

    started_at: datetime
    completed_at: datetime | None = None
    changed: int = 0
    unchanged: int = 0
    skipped: int = 0
    failed: int = 0
    recovered: int = 0
    failed_checkout_ids: list[str] = field(default_factory=list)

    def as_counts(self) -> dict[str, int]:
        """Changed/unchanged counts, the shape update_states() returns."""
        return {"changed": self.changed, "unchanged": self.unchanged}

    def to_dict(self) -> dict[str, Any]:
        return {
            "changed": self.changed,
            "unchanged": self.unchanged,
            "skipped": self.skipped,
            "failed": self.failed,
            "recovered": self.recovered,
        }


# =============================================================================
# State Sync Service
# =============================================================================


class CheckoutStateSyncService(BaseService):
    """
    Service for syncing checkout state with Braintree.

    Usage:
        # Batch run (what the periodic task does)
        counts = CheckoutStateSyncService.update_states()

        # Single checkout
        result = CheckoutStateSyncService.refresh_checkout(checkout_id)
    """

    # Braintree adapter - can be injected for testing
    _gateway_adapter: BraintreeAdapter | None = None

    @classmethod
    def get_gateway_adapter(cls) -> BraintreeAdapter:
        """Get the Braintree adapter (default merchant credentials)."""
        return cls._gateway_adapter or BraintreeAdapter.from_settings()

    @classmethod
    def set_gateway_adapter(cls, adapter: BraintreeAdapter | None) -> None:
        """Set the Braintree adapter (for testing)."""
        cls._gateway_adapter = adapter

    # =========================================================================
    # Public API
    # =========================================================================

    @classmethod
    def update_states(cls) -> dict[str, int]:
        """
        Sync every non-final checkout with Braintree.

        Returns:
            {"changed": int, "unchanged": int}

        Raises:
            StateSyncLockError: If another run is already in progress
        """
        return cls.run_state_sync().as_counts()

    @classmethod
    def run_state_sync(cls) -> StateSyncResult:
        """
        Run a full state sync pass under the run lock.

        Returns:
            StateSyncResult with changed/unchanged/skipped/failed/recovered
            counts

        Raises:
            StateSyncLockError: If another run is already in progress
        """
        ttl = getattr(settings, "CHECKOUT_STATE_SYNC_LOCK_TTL", STATE_SYNC_LOCK_TTL)
        lock = DistributedLock(STATE_SYNC_LOCK_KEY, ttl=ttl, blocking=False)

        try:
            lock.acquire()
        except StateSyncLockError:
            cls.get_logger().warning(
                "Another checkout state sync run is in progress",
                extra={"lock_key": STATE_SYNC_LOCK_KEY},
            )
            raise

        try:
            return cls._run_state_sync_with_lock(lock)
        finally:
            try:
                lock.release()
            except RedisError as e:
                # The lock expires on its own once its TTL runs out
                cls.get_logger().warning(
                    "Could not release checkout state sync lock",
                    extra={"lock_key": STATE_SYNC_LOCK_KEY, "error": str(e)},
                )

    @classmethod
    def refresh_checkout(
        cls,
        checkout_id: uuid.UUID | str,
    ) -> ServiceResult[CheckoutRefreshResult]:
        """
        Refresh a single checkout against Braintree.

        Use this for on-demand refreshes of a specific checkout.

        Args:
            checkout_id: UUID of the BraintreeCheckout

        Returns:
            ServiceResult containing CheckoutRefreshResult
        """
        cls.get_logger().info(
            "Refreshing single checkout",
            extra={"checkout_id": str(checkout_id)},
        )

        if not BraintreeCheckout.objects.filter(id=checkout_id).exists():
            return ServiceResult.failure(
                f"Checkout {checkout_id} not found",
                error_code="CHECKOUT_NOT_FOUND",
            )

        try:
            refresh = cls._refresh_checkout(checkout_id, cls.get_gateway_adapter())
        except (GatewayError, CheckoutPersistenceError) as e:
            cls.get_logger().warning(
                "Checkout refresh failed",
                extra={"checkout_id": str(checkout_id), "error": str(e)},
            )
            return ServiceResult.from_exception(e)

        return ServiceResult.success(refresh)

    # =========================================================================
    # Internal: Run Orchestration
    # =========================================================================

    @classmethod
    def _run_state_sync_with_lock(cls, lock: DistributedLock) -> StateSyncResult:
        """Execute a state sync run with the run lock already held."""
        logger = cls.get_logger()
        adapter = cls.get_gateway_adapter()
        result = StateSyncResult(started_at=timezone.now())

        checkout_ids = list(
            BraintreeCheckout.objects.pending_sync().oldest().values_list("id", flat=True)
        )
        logger.info(
            "Starting checkout state sync",
            extra={"checkouts_to_check": len(checkout_ids)},
        )

        for checkout_id in checkout_ids:
            try:
                refresh = cls._refresh_checkout(checkout_id, adapter)

            except GatewayUnavailableError as e:
                result.failed += 1
                result.failed_checkout_ids.append(str(checkout_id))
                logger.warning(
                    "Braintree unavailable during checkout sync, skipping",
                    extra={"checkout_id": str(checkout_id), "error": str(e)},
                )
                continue

            except Exception as e:
                result.failed += 1
                result.failed_checkout_ids.append(str(checkout_id))
                logger.error(
                    "Error syncing checkout state",
                    extra={"checkout_id": str(checkout_id), "error": str(e)},
                    exc_info=True,
                )
                continue

            finally:
                cls._extend_lock(lock, checkout_id)

            if refresh.outcome == RefreshOutcome.CHANGED:
                result.changed += 1
            elif refresh.outcome == RefreshOutcome.UNCHANGED:
                result.unchanged += 1
            else:
                result.skipped += 1

        recovery = FailedOrderRecoveryService.recover_recent(adapter)
        result.recovered = recovery.reopened
        result.completed_at = timezone.now()

        logger.info(
            "Checkout state sync completed",
            extra={
                **result.to_dict(),
                "recovery_failed": recovery.failed,
                "duration_seconds": (result.completed_at - result.started_at).total_seconds(),
            },
        )
        return result

    @classmethod
    def _extend_lock(cls, lock: DistributedLock, checkout_id: uuid.UUID) -> None:
        """
        Push the run lock's TTL out after one checkout.

        A Redis failure here does not end the scan; the lock keeps its
        current TTL and the next checkout tries again.
        """
        try:
            lock.extend()
        except RedisError as e:
            cls.get_logger().warning(
                "Could not extend checkout state sync lock",
                extra={
                    "lock_key": STATE_SYNC_LOCK_KEY,
                    "checkout_id": str(checkout_id),
                    "error": str(e),
                },
            )

    # =========================================================================
    # Internal: Single Checkout
    # =========================================================================

    @classmethod
    def _refresh_checkout(
        cls,
        checkout_id: uuid.UUID | str,
        adapter: BraintreeAdapter,
    ) -> CheckoutRefreshResult:
        """
        Fetch, compare, persist and reconcile one checkout atomically.

        Raises:
            GatewayError: If the Braintree lookup fails
            CheckoutPersistenceError: If saving the change fails
        """
        try:
            with cls.atomic():
                checkout = (
                    BraintreeCheckout.objects.select_for_update(skip_locked=True)
                    .filter(id=checkout_id)
                    .first()
                )

                if checkout is None:
                    return CheckoutRefreshResult(
                        checkout_id=checkout_id,
                        outcome=RefreshOutcome.LOCKED,
                        previous_state="",
                        state="",
                    )

                previous_state = checkout.state
                if checkout.is_final:
                    return CheckoutRefreshResult(
                        checkout_id=checkout.id,
                        outcome=RefreshOutcome.FINAL,
                        previous_state=previous_state,
                        state=previous_state,
                    )

                gateway_status = checkout.fetch_gateway_status(adapter)
                if not checkout.apply_gateway_status(gateway_status):
                    return CheckoutRefreshResult(
                        checkout_id=checkout.id,
                        outcome=RefreshOutcome.UNCHANGED,
                        previous_state=previous_state,
                        state=checkout.state,
                    )

                checkout.save(update_fields=["state", "updated_at"])
                action = PaymentStateReconciler.reconcile(checkout, previous_state)

        except DatabaseError as e:
            raise CheckoutPersistenceError(
                f"Failed to persist checkout {checkout_id}: {e}",
                details={"checkout_id": str(checkout_id)},
            ) from e

        cls.get_logger().info(
            "Checkout state changed",
            extra={
                "checkout_id": str(checkout.id),
                "transaction_id": checkout.transaction_id,
                "previous_state": previous_state,
                "state": checkout.state,
                "payment_action": action.value if action else None,
            },
        )

        return CheckoutRefreshResult(
            checkout_id=checkout.id,
            outcome=RefreshOutcome.CHANGED,
            previous_state=previous_state,
            state=checkout.state,
            payment_action=action.value if action else None,
        )


__all__ = [
    "CheckoutRefreshResult",
    "CheckoutStateSyncService",
    "RefreshOutcome",
    "StateSyncResult",
]
