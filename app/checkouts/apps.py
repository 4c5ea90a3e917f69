"""
Checkouts app configuration.

This app mirrors Braintree transactions as BraintreeCheckout records and
keeps them, and the payments they fund, in sync with Braintree.
"""

from django.apps import AppConfig


class CheckoutsConfig(AppConfig):
    """Configuration for the checkouts application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "checkouts"
    verbose_name = "Checkouts"
