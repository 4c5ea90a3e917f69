"""
Checkout models.

Models:
    BraintreeCheckout: Local mirror of a Braintree transaction
"""

from checkouts.models.braintree_checkout import BraintreeCheckout, CheckoutQuerySet

__all__ = [
    "BraintreeCheckout",
    "CheckoutQuerySet",
]
