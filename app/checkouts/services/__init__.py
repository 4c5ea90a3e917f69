"""
Services for Braintree checkout reconciliation.

Services:
    CheckoutStateSyncService: Syncs checkout state with Braintree
    PaymentStateReconciler: Applies payment transitions for state changes
    FailedOrderRecoveryService: Repairs failed payments on settled checkouts
    CheckoutFactoryService: Creates checkouts from params or vault tokens

Usage:
    from checkouts.services import CheckoutStateSyncService

    counts = CheckoutStateSyncService.update_states()
"""

from checkouts.services.checkout_factory import CheckoutFactoryService
from checkouts.services.payment_reconciler import PaymentStateReconciler
from checkouts.services.recovery_service import (
    FailedOrderRecoveryService,
    RecoveryOutcome,
    RecoveryResult,
)
from checkouts.services.state_sync_service import (
    CheckoutRefreshResult,
    CheckoutStateSyncService,
    RefreshOutcome,
    StateSyncResult,
)

__all__ = [
    "CheckoutFactoryService",
    "CheckoutRefreshResult",
    "CheckoutStateSyncService",
    "FailedOrderRecoveryService",
    "PaymentStateReconciler",
    "RecoveryOutcome",
    "RecoveryResult",
    "RefreshOutcome",
    "StateSyncResult",
]
