"""
Tests for BaseQuerySet helpers.
"""

from datetime import timedelta

import pytest
from django.utils import timezone
from freezegun import freeze_time

from checkouts.models import BraintreeCheckout
from checkouts.tests.factories import BraintreeCheckoutFactory


@pytest.mark.django_db
class TestBaseQuerySet:
    """Tests for created_between and oldest."""

    def test_created_between_is_inclusive(self):
        now = timezone.now()
        with freeze_time(now - timedelta(days=3)):
            old = BraintreeCheckoutFactory()
        with freeze_time(now - timedelta(days=1)):
            recent = BraintreeCheckoutFactory()

        found = BraintreeCheckout.objects.created_between(now - timedelta(days=1), now)

        assert list(found) == [recent]
        assert old not in found

    def test_oldest_orders_by_creation(self):
        now = timezone.now()
        with freeze_time(now - timedelta(hours=1)):
            second = BraintreeCheckoutFactory()
        with freeze_time(now - timedelta(hours=2)):
            first = BraintreeCheckoutFactory()

        assert list(BraintreeCheckout.objects.oldest()) == [first, second]
