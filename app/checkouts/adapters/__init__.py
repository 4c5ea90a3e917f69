"""
Gateway adapters for the checkouts app.

Adapters:
    BraintreeAdapter: Braintree transaction and vault lookups
"""

from checkouts.adapters.braintree_adapter import (
    BraintreeAdapter,
    TransactionResult,
    VaultedPaymentMethod,
)

__all__ = [
    "BraintreeAdapter",
    "TransactionResult",
    "VaultedPaymentMethod",
]
