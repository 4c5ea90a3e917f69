"""
Checkout-specific exceptions for gateway and reconciliation operations.

Exception Hierarchy:
    GatewayError (base for Braintree failures, ExternalServiceError)
    ├── GatewayNotFoundError - Transaction or payment method missing (permanent)
    ├── GatewayAuthenticationError - Bad or unauthorized credentials (permanent)
    ├── GatewayUnavailableError - Braintree unreachable or 5xx (transient, retry)
    ├── GatewayRateLimitError - Too many requests (transient, retry)
    └── GatewayTimeoutError - Request timed out (transient, retry)

    CheckoutPersistenceError - Saving reconciled state failed
    CheckoutImmutableError - Write to a final or immutable field (ConflictError)
    StateSyncLockError - Another state sync run holds the lock (ConflictError)

Usage:
    from checkouts.exceptions import GatewayError

    try:
        result = adapter.find_transaction(checkout.transaction_id)
    except GatewayError as e:
        if e.is_retryable:
            # Left untouched; picked up again on the next scan
            ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError, ConflictError, ExternalServiceError

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Gateway Exceptions
# =============================================================================


class GatewayError(ExternalServiceError):
    """
    Base exception for all Braintree gateway errors.

    Attributes:
        gateway_error: Class name of the Braintree SDK exception, if any
        is_retryable: Whether a later attempt may succeed

    Example:
        try:
            BraintreeAdapter().find_transaction("abc123")
        except GatewayError as e:
            logger.warning(f"Gateway call failed: {e.error_code}")
    """

    default_error_code: str = "GATEWAY_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        gateway_error: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if gateway_error:
            details["gateway_error"] = gateway_error
        super().__init__(message, error_code=error_code, details=details)
        self.gateway_error = gateway_error


# -----------------------------------------------------------------------------
# Permanent Errors (do not retry)
# -----------------------------------------------------------------------------


class GatewayNotFoundError(GatewayError):
    """
    Braintree has no record of the requested transaction or token.

    Retrying will not help; the local record references something the
    gateway does not know about and needs manual investigation.
    """

    default_error_code: str = "GATEWAY_NOT_FOUND"
    is_retryable: bool = False


class GatewayAuthenticationError(GatewayError):
    """
    Braintree rejected our credentials or their permissions.

    Raised for both authentication and authorization failures. Every
    subsequent call with the same credentials fails the same way.
    """

    default_error_code: str = "GATEWAY_AUTHENTICATION_FAILED"
    is_retryable: bool = False


# -----------------------------------------------------------------------------
# Transient Errors (safe to retry on the next scan)
# -----------------------------------------------------------------------------


class GatewayUnavailableError(GatewayError):
    """
    Braintree is temporarily unavailable.

    This covers:
    - Network connectivity issues
    - Braintree server errors (5xx)
    - Maintenance windows
    - Unexpected transport errors

    Checkouts whose lookup fails this way keep their current state and
    remain eligible for the next scan.
    """

    default_error_code: str = "GATEWAY_UNAVAILABLE"
    is_retryable: bool = True


class GatewayRateLimitError(GatewayUnavailableError):
    """Rate limited by Braintree (HTTP 429)."""

    default_error_code: str = "GATEWAY_RATE_LIMITED"


class GatewayTimeoutError(GatewayUnavailableError):
    """
    Braintree call timed out.

    Only query calls are issued, so a timeout is always safe to retry.
    """

    default_error_code: str = "GATEWAY_TIMEOUT"


# =============================================================================
# Reconciliation Exceptions
# =============================================================================


class CheckoutPersistenceError(BaseApplicationError):
    """
    Raised when reconciled checkout state cannot be written.

    Wraps the underlying django.db.DatabaseError. The transaction is rolled
    back, so the checkout keeps its previous state and stays eligible.
    """

    default_error_code: str = "CHECKOUT_PERSISTENCE_FAILED"


class CheckoutImmutableError(ConflictError):
    """
    Raised on a write to a field that may no longer change.

    Use for:
    - State change on a checkout already in a final state
    - Reassigning transaction_id once it has been set

    Example:
        if checkout.is_final:
            raise CheckoutImmutableError(
                "Checkout is in a final state",
                details={"checkout_id": str(checkout.id), "state": checkout.state},
            )
    """

    default_error_code: str = "CHECKOUT_IMMUTABLE"


class StateSyncLockError(ConflictError):
    """
    Raised when another state sync run already holds the run lock.

    The Celery task reports the run as skipped.
    """

    default_error_code: str = "STATE_SYNC_LOCKED"


__all__ = [
    "CheckoutImmutableError",
    "CheckoutPersistenceError",
    "GatewayAuthenticationError",
    "GatewayError",
    "GatewayNotFoundError",
    "GatewayRateLimitError",
    "GatewayTimeoutError",
    "GatewayUnavailableError",
    "StateSyncLockError",
]
