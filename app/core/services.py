"""
Base service layer patterns for business logic encapsulation.

This module provides foundational patterns for the service layer:
- ServiceResult: Standard result wrapper for consistent success/failure handling
- BaseService: Base class with common service utilities

Service Layer Philosophy:
    Services encapsulate business logic separate from models and tasks.
    Models hold data and invariants, tasks handle scheduling, services
    handle the reconciliation logic in between.

Pattern Comparison:
    - ServiceResult: Use for expected failures (record missing, business rules)
    - Exceptions: Use for unexpected failures (database errors, bugs)

Usage:
    from core.services import BaseService, ServiceResult

    class CheckoutService(BaseService):
        @classmethod
        def refresh(cls, checkout_id) -> ServiceResult[BraintreeCheckout]:
            checkout = BraintreeCheckout.objects.filter(id=checkout_id).first()
            if checkout is None:
                return ServiceResult.failure(
                    "Checkout not found",
                    error_code="CHECKOUT_NOT_FOUND",
                )

            with cls.atomic():
                checkout.save()

            cls.get_logger().info(f"Refreshed checkout {checkout.id}")
            return ServiceResult.success(checkout)

Related:
    - core.exceptions: For unexpected/exceptional errors
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any

# Generic type for ServiceResult data
T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Provides consistent success/failure handling without exceptions.
    Use this for expected failures (missing records, business rule violations).

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code for callers
        errors: Field-level errors for validation failures

    Usage:
        # Success case
        return ServiceResult.success(refresh_result)

        # Failure case
        return ServiceResult.failure("Checkout not found", "CHECKOUT_NOT_FOUND")

        # Check result
        result = CheckoutStateSyncService.refresh_checkout(checkout_id)
        if result.success:
            refresh = result.data
        else:
            print(f"Error: {result.error} ({result.error_code})")
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """
        Create a successful result.

        Args:
            data: The result data

        Returns:
            ServiceResult with success=True and data set
        """
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code
            errors: Field-level errors (for validation failures)

        Returns:
            ServiceResult with success=False and error details
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            errors=errors,
        )

    @classmethod
    def from_exception(cls, exc: Exception, error_code: str | None = None) -> ServiceResult[T]:
        """
        Create a failed result from an exception.

        Args:
            exc: The caught exception
            error_code: Optional error code (defaults to the exception's
                error_code attribute, then its class name)

        Returns:
            ServiceResult with error details from exception

        Example:
            try:
                adapter.find_transaction(transaction_id)
            except GatewayError as e:
                return ServiceResult.from_exception(e)
        """
        return cls(
            success=False,
            error=getattr(exc, "message", str(exc)),
            error_code=(
                error_code
                or getattr(exc, "error_code", None)
                or exc.__class__.__name__.upper()
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a plain dictionary (e.g. for Celery task results).

        Returns:
            Dict with success status and data or error details
        """
        if self.success:
            return {"success": True, "data": self.data}

        response: dict[str, Any] = {
            "success": False,
            "error": self.error,
        }
        if self.error_code:
            response["error_code"] = self.error_code
        if self.errors:
            response["errors"] = self.errors
        return response

    def __bool__(self) -> bool:
        """
        Allow using result in boolean context.

        Example:
            result = CheckoutStateSyncService.refresh_checkout(checkout_id)
            if result:  # Same as: if result.success
                print("Refreshed!")
        """
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management

    Design Notes:
        - Use @staticmethod or @classmethod (no instance state)
        - Services should be stateless
        - Use ServiceResult for expected failures
        - Raise exceptions for unexpected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        All database operations within this context manager are
        wrapped in a transaction. If any operation fails, all
        changes are rolled back.

        Example:
            with cls.atomic():
                checkout.save(update_fields=["state", "updated_at"])
                PaymentStateReconciler.reconcile(checkout, previous_state)
                # If the payment action fails, the checkout write rolls back too
        """
        with transaction.atomic():
            yield
