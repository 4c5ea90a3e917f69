"""
Braintree API adapter for checkout reconciliation.

This module provides the BraintreeAdapter class which encapsulates all
Braintree API interactions. Every Braintree call goes through this adapter
so that timeouts, error translation and logging are consistent.

Only query operations are exposed: transaction lookup and vaulted payment
method lookup. No capture, refund or authorization call is ever issued.

Configuration (via settings):
- BRAINTREE_ENVIRONMENT: sandbox / production / development / qa
- BRAINTREE_MERCHANT_ID, BRAINTREE_PUBLIC_KEY, BRAINTREE_PRIVATE_KEY
- BRAINTREE_TIMEOUT_SECONDS: API call timeout (default: 10)
- BRAINTREE_PAYMENT_METHODS: payment method id -> credential overrides

Usage:
    from checkouts.adapters import BraintreeAdapter

    adapter = BraintreeAdapter.from_settings()
    result = adapter.find_transaction("8s7d6f5g")
    result.status   # "settled"
    result.amount   # Decimal("100.00")

    adapter = BraintreeAdapter.for_payment_method(payment_method_id)
    vaulted = adapter.find_payment_method(token)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import braintree
from braintree.exceptions import (
    AuthenticationError,
    AuthorizationError,
    GatewayTimeoutError as BraintreeGatewayTimeoutError,
    NotFoundError,
    RequestTimeoutError,
    ServerError,
    ServiceUnavailableError,
    TooManyRequestsError,
)
from django.conf import settings

from checkouts.exceptions import (
    GatewayAuthenticationError,
    GatewayError,
    GatewayNotFoundError,
    GatewayRateLimitError,
    GatewayTimeoutError,
    GatewayUnavailableError,
)


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class TransactionResult:
    """
    Result from a Braintree transaction lookup.

    Attributes:
        id: Braintree transaction id
        status: Braintree transaction status (authorized, settled, ...)
        amount: Transaction amount in major currency units
        currency: ISO 4217 currency code
        paypal_email: Payer email when the transaction is PayPal-funded
    """

    id: str
    status: str
    amount: Decimal
    currency: str | None = None
    paypal_email: str | None = None


@dataclass
class VaultedPaymentMethod:
    """
    A payment method stored in the Braintree vault.

    Which fields are present depends on the payment method kind: cards
    carry card_type and last_4, PayPal accounts carry email.

    Attributes:
        token: Vault token
        card_type: Braintree card brand label (e.g., "MasterCard")
        email: PayPal account email
        last_4: Last four digits of the card
    """

    token: str
    card_type: str | None = None
    email: str | None = None
    last_4: str | None = None


# =============================================================================
# Braintree Adapter
# =============================================================================


class BraintreeAdapter:
    """
    Adapter for Braintree API operations.

    Each instance wraps one braintree.BraintreeGateway configured with one
    set of merchant credentials. Instances hold no other state and are safe
    to share between calls in a Celery worker.

    Usage:
        adapter = BraintreeAdapter.from_settings()
        result = adapter.find_transaction(transaction_id)
    """

    def __init__(
        self,
        merchant_id: str,
        public_key: str,
        private_key: str,
        environment: str = "sandbox",
        timeout: int = 10,
        gateway: braintree.BraintreeGateway | None = None,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            merchant_id: Braintree merchant id
            public_key: Braintree public key
            private_key: Braintree private key
            environment: Braintree environment name
            timeout: Request timeout in seconds
            gateway: Pre-built gateway (tests); built from credentials if None
        """
        self.merchant_id = merchant_id
        self.environment = environment
        if gateway is None:
            gateway = braintree.BraintreeGateway(
                braintree.Configuration(
                    environment=environment,
                    merchant_id=merchant_id,
                    public_key=public_key,
                    private_key=private_key,
                    timeout=timeout,
                )
            )
        self.gateway = gateway

    # =========================================================================
    # Configuration
    # =========================================================================

    @classmethod
    def from_settings(cls) -> BraintreeAdapter:
        """Build an adapter from the default merchant credentials."""
        return cls(
            merchant_id=settings.BRAINTREE_MERCHANT_ID,
            public_key=settings.BRAINTREE_PUBLIC_KEY,
            private_key=settings.BRAINTREE_PRIVATE_KEY,
            environment=settings.BRAINTREE_ENVIRONMENT,
            timeout=getattr(settings, "BRAINTREE_TIMEOUT_SECONDS", 10),
        )

    @classmethod
    def for_payment_method(cls, payment_method_id: int | str) -> BraintreeAdapter:
        """
        Build an adapter for a configured payment method.

        Credentials missing from the payment method's entry in
        BRAINTREE_PAYMENT_METHODS fall back to the default merchant.

        Args:
            payment_method_id: Key in BRAINTREE_PAYMENT_METHODS

        Raises:
            GatewayNotFoundError: If the payment method is not configured
        """
        methods = getattr(settings, "BRAINTREE_PAYMENT_METHODS", {}) or {}
        config = methods.get(str(payment_method_id))
        if config is None:
            raise GatewayNotFoundError(
                f"Payment method {payment_method_id} is not configured",
                error_code="PAYMENT_METHOD_NOT_FOUND",
                details={"payment_method_id": str(payment_method_id)},
            )

        return cls(
            merchant_id=config.get("merchant_id", settings.BRAINTREE_MERCHANT_ID),
            public_key=config.get("public_key", settings.BRAINTREE_PUBLIC_KEY),
            private_key=config.get("private_key", settings.BRAINTREE_PRIVATE_KEY),
            environment=config.get("environment", settings.BRAINTREE_ENVIRONMENT),
            timeout=getattr(settings, "BRAINTREE_TIMEOUT_SECONDS", 10),
        )

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    # =========================================================================
    # Query Operations
    # =========================================================================

    def find_transaction(self, transaction_id: str) -> TransactionResult:
        """
        Look up a transaction by id.

        Args:
            transaction_id: Braintree transaction id

        Returns:
            TransactionResult with the gateway's current status and amount

        Raises:
            GatewayNotFoundError: Transaction does not exist
            GatewayAuthenticationError: Credentials rejected
            GatewayUnavailableError: Braintree unreachable (retryable)
        """
        logger = self.get_logger()
        log_context = {
            "operation": "find_transaction",
            "transaction_id": transaction_id,
            "merchant_id": self.merchant_id,
        }

        if not transaction_id:
            raise GatewayNotFoundError(
                "Transaction id is blank",
                details={"transaction_id": transaction_id},
            )

        start_time = time.time()
        logger.debug("Starting Braintree operation", extra=log_context)

        try:
            transaction = self.gateway.transaction.find(transaction_id)

            duration_ms = (time.time() - start_time) * 1000
            logger.debug(
                "Braintree operation completed",
                extra={
                    **log_context,
                    "status": transaction.status,
                    "duration_ms": duration_ms,
                },
            )

            paypal_details = getattr(transaction, "paypal_details", None)
            return TransactionResult(
                id=transaction.id,
                status=transaction.status,
                amount=Decimal(str(transaction.amount)),
                currency=getattr(transaction, "currency_iso_code", None),
                paypal_email=getattr(paypal_details, "payer_email", None),
            )

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self._handle_gateway_error(e, log_context, duration_ms)
            raise

    def find_payment_method(self, token: str) -> VaultedPaymentMethod:
        """
        Look up a vaulted payment method by token.

        Args:
            token: Braintree vault token

        Returns:
            VaultedPaymentMethod; fields the method kind lacks are None

        Raises:
            GatewayNotFoundError: Token does not exist
            GatewayAuthenticationError: Credentials rejected
            GatewayUnavailableError: Braintree unreachable (retryable)
        """
        logger = self.get_logger()
        log_context = {
            "operation": "find_payment_method",
            "merchant_id": self.merchant_id,
        }

        start_time = time.time()
        logger.debug("Starting Braintree operation", extra=log_context)

        try:
            payment_method = self.gateway.payment_method.find(token)

            duration_ms = (time.time() - start_time) * 1000
            logger.debug(
                "Braintree operation completed",
                extra={
                    **log_context,
                    "payment_method_type": type(payment_method).__name__,
                    "duration_ms": duration_ms,
                },
            )

            return VaultedPaymentMethod(
                token=token,
                card_type=getattr(payment_method, "card_type", None),
                email=getattr(payment_method, "email", None),
                last_4=getattr(payment_method, "last_4", None),
            )

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self._handle_gateway_error(e, log_context, duration_ms)
            raise

    # =========================================================================
    # Error Handling
    # =========================================================================

    @classmethod
    def _handle_gateway_error(
        cls,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate Braintree SDK exceptions to domain exceptions.

        Args:
            error: The Braintree exception
            log_context: Logging context dict
            duration_ms: Operation duration for logging

        Raises:
            GatewayNotFoundError: Resource not found
            GatewayAuthenticationError: Credentials rejected
            GatewayRateLimitError: Rate limited
            GatewayTimeoutError: Request timed out
            GatewayUnavailableError: Server error or unexpected failure
        """
        logger = cls.get_logger()
        log_context = {**log_context, "duration_ms": duration_ms}
        gateway_error = type(error).__name__

        if isinstance(error, GatewayError):
            raise error

        if isinstance(error, NotFoundError):
            logger.error("Resource not found on Braintree", extra=log_context)
            raise GatewayNotFoundError(
                "Braintree resource not found",
                gateway_error=gateway_error,
                details={"transaction_id": log_context.get("transaction_id")},
            )

        elif isinstance(error, (AuthenticationError, AuthorizationError)):
            # Invalid credentials - permanent, operational issue
            logger.critical(
                "Braintree authentication failed - check merchant credentials",
                extra=log_context,
            )
            raise GatewayAuthenticationError(
                "Braintree authentication failed",
                gateway_error=gateway_error,
            )

        elif isinstance(error, TooManyRequestsError):
            logger.warning("Rate limited by Braintree", extra=log_context)
            raise GatewayRateLimitError(
                "Braintree rate limit exceeded. Please retry.",
                gateway_error=gateway_error,
            )

        elif isinstance(error, (BraintreeGatewayTimeoutError, RequestTimeoutError)):
            logger.warning("Braintree request timed out", extra=log_context)
            raise GatewayTimeoutError(
                "Braintree request timed out. Please retry.",
                gateway_error=gateway_error,
            )

        elif isinstance(error, (ServerError, ServiceUnavailableError)):
            logger.error(
                "Braintree service error",
                extra=log_context,
                exc_info=True,
            )
            raise GatewayUnavailableError(
                "Braintree service error. Please retry.",
                gateway_error=gateway_error,
            )

        else:
            # Unknown error - log and wrap
            logger.error(
                f"Unexpected error from Braintree: {gateway_error}",
                extra=log_context,
                exc_info=True,
            )
            raise GatewayUnavailableError(
                f"Unexpected Braintree error: {error}",
                gateway_error=gateway_error,
            )
