"""
Tests for CheckoutFactoryService.

These tests verify:
- Checkouts built from submitted params carry normalized card data
- Checkouts built from vaulted tokens use the payment method's adapter
- Unconfigured payment methods are rejected
"""

import pytest

from checkouts.adapters import BraintreeAdapter, VaultedPaymentMethod
from checkouts.exceptions import GatewayNotFoundError
from checkouts.services import CheckoutFactoryService
from checkouts.state_machines import CheckoutState


@pytest.mark.django_db
class TestCreateFromParams:
    """Tests for CheckoutFactoryService.create_from_params."""

    def test_card_params(self):
        checkout = CheckoutFactoryService.create_from_params(
            {
                "paypal_email": "",
                "braintree_last_two": "11",
                "braintree_card_type": "MasterCard",
            }
        )

        assert checkout.pk is not None
        assert checkout.paypal_email is None
        assert checkout.braintree_last_digits == "11"
        assert checkout.braintree_card_type == "master"
        assert checkout.state == CheckoutState.AUTHORIZING
        assert checkout.transaction_id == ""

    def test_paypal_params(self):
        checkout = CheckoutFactoryService.create_from_params(
            {"paypal_email": "payer@example.com"}
        )

        assert checkout.paypal_email == "payer@example.com"
        assert checkout.braintree_card_type == ""
        assert checkout.braintree_last_digits == ""

    def test_unknown_card_type_is_lowercased(self):
        checkout = CheckoutFactoryService.create_from_params(
            {"braintree_card_type": "Carte Blanche"}
        )

        assert checkout.braintree_card_type == "carte blanche"


@pytest.mark.django_db
class TestCreateFromToken:
    """Tests for CheckoutFactoryService.create_from_token."""

    def test_vaulted_card(self, mocker):
        adapter = mocker.MagicMock(spec=BraintreeAdapter)
        adapter.find_payment_method.return_value = VaultedPaymentMethod(
            token="tok_1",
            card_type="AmericanExpress",
            last_4="0005",
        )
        for_payment_method = mocker.patch.object(
            BraintreeAdapter, "for_payment_method", return_value=adapter
        )

        checkout = CheckoutFactoryService.create_from_token("tok_1", 7)

        for_payment_method.assert_called_once_with(7)
        adapter.find_payment_method.assert_called_once_with("tok_1")
        assert checkout.braintree_card_type == "american_express"
        assert checkout.braintree_last_digits == "0005"
        assert checkout.paypal_email is None

    def test_vaulted_paypal_account(self, mocker):
        adapter = mocker.MagicMock(spec=BraintreeAdapter)
        adapter.find_payment_method.return_value = VaultedPaymentMethod(
            token="tok_2",
            email="payer@example.com",
        )
        mocker.patch.object(BraintreeAdapter, "for_payment_method", return_value=adapter)

        checkout = CheckoutFactoryService.create_from_token("tok_2", 7)

        assert checkout.paypal_email == "payer@example.com"
        assert checkout.braintree_card_type == ""

    def test_unconfigured_payment_method(self, settings):
        settings.BRAINTREE_PAYMENT_METHODS = {}

        with pytest.raises(GatewayNotFoundError) as exc_info:
            CheckoutFactoryService.create_from_token("tok_3", 99)

        assert exc_info.value.error_code == "PAYMENT_METHOD_NOT_FOUND"
