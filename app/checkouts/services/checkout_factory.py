"""
Creation of BraintreeCheckout records.

Checkouts are created either from client-supplied form params (Drop-in /
Hosted Fields submissions) or from a token already stored in the Braintree
vault. Card brands are normalized with map_card_type in both cases.

Usage:
    from checkouts.services import CheckoutFactoryService

    checkout = CheckoutFactoryService.create_from_params(
        {"paypal_email": None, "braintree_last_two": "11", "braintree_card_type": "Visa"}
    )

    checkout = CheckoutFactoryService.create_from_token(token, payment_method_id)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.services import BaseService

from checkouts.adapters import BraintreeAdapter
from checkouts.models import BraintreeCheckout
from checkouts.state_machines import map_card_type

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any


class CheckoutFactoryService(BaseService):
    """Builds BraintreeCheckout records from params or vaulted tokens."""

    @classmethod
    def create_from_params(cls, params: Mapping[str, Any]) -> BraintreeCheckout:
        """
        Create a checkout from submitted checkout params.

        Args:
            params: Mapping with optional paypal_email, braintree_last_two
                and braintree_card_type keys

        Returns:
            The created BraintreeCheckout
        """
        checkout = BraintreeCheckout.objects.create(
            paypal_email=params.get("paypal_email") or None,
            braintree_last_digits=params.get("braintree_last_two") or "",
            braintree_card_type=map_card_type(params.get("braintree_card_type")),
        )

        cls.get_logger().info(
            "Created checkout from params",
            extra={
                "checkout_id": str(checkout.id),
                "card_type": checkout.braintree_card_type,
                "paypal": checkout.paypal_email is not None,
            },
        )
        return checkout

    @classmethod
    def create_from_token(
        cls,
        token: str,
        payment_method_id: int | str,
    ) -> BraintreeCheckout:
        """
        Create a checkout from a vaulted Braintree payment method.

        Args:
            token: Braintree vault token
            payment_method_id: Configured payment method whose merchant
                credentials own the token

        Returns:
            The created BraintreeCheckout

        Raises:
            GatewayError: If the payment method or token cannot be resolved
        """
        adapter = BraintreeAdapter.for_payment_method(payment_method_id)
        vaulted = adapter.find_payment_method(token)

        checkout = BraintreeCheckout.objects.create(
            paypal_email=vaulted.email or None,
            braintree_last_digits=vaulted.last_4 or "",
            braintree_card_type=map_card_type(vaulted.card_type),
        )

        cls.get_logger().info(
            "Created checkout from vaulted payment method",
            extra={
                "checkout_id": str(checkout.id),
                "payment_method_id": str(payment_method_id),
                "card_type": checkout.braintree_card_type,
            },
        )
        return checkout


__all__ = ["CheckoutFactoryService"]
