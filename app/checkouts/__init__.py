"""
Checkouts app for Braintree checkout reconciliation.

This app handles:
- BraintreeCheckout records mirroring Braintree transactions
- Periodic state sync against Braintree
- Payment transitions driven by checkout state changes
- Recovery of failed orders whose PayPal checkout settled

Related apps:
    - orders: Order and Payment models funded by checkouts

Usage:
    from checkouts.services import CheckoutStateSyncService

    counts = CheckoutStateSyncService.update_states()
"""
