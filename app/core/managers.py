"""
Custom QuerySet classes for common patterns.

This module provides reusable queryset patterns:
- BaseQuerySet: Common utility methods for querysets

Usage:
    from core.managers import BaseQuerySet

    class CheckoutQuerySet(BaseQuerySet):
        def in_states(self, states):
            return self.filter(state__in=states)

    class BraintreeCheckout(BaseModel):
        objects = CheckoutQuerySet.as_manager()

    # Use inherited methods
    BraintreeCheckout.objects.created_between(start, end).in_states(["settled"])
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import models

if TYPE_CHECKING:
    from datetime import date, datetime


class BaseQuerySet(models.QuerySet):
    """
    Enhanced QuerySet with common utility methods.

    Methods:
        created_between(start, end): Filter by creation date range
        oldest(): Order by creation date ascending

    Note:
        All methods assume the model has created_at and updated_at fields
        (provided by BaseModel).
    """

    def created_between(
        self,
        start: datetime | date,
        end: datetime | date,
    ) -> BaseQuerySet:
        """
        Filter records created within date range.

        Args:
            start: Start date/datetime (inclusive)
            end: End date/datetime (inclusive)

        Returns:
            Filtered queryset
        """
        return self.filter(created_at__gte=start, created_at__lte=end)

    def oldest(self) -> BaseQuerySet:
        """Order by creation date ascending (oldest first)."""
        return self.order_by("created_at")
