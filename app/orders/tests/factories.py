"""
Factory Boy factories for order test data.

Usage:
    from orders.tests.factories import OrderFactory, PaymentFactory

    order = OrderFactory(total=Decimal("100.00"))
    payment = PaymentFactory(order=order, state=PaymentState.FAILED)
"""

from decimal import Decimal

import factory

from orders.models import Order, Payment
from orders.states import PaymentState, ShipmentState


class OrderFactory(factory.django.DjangoModelFactory):
    """
    Factory for creating Order instances.

    Default creates a $100.00 USD order with pending shipments.
    """

    class Meta:
        model = Order

    number = factory.Sequence(lambda n: f"R{n:09d}")
    total = Decimal("100.00")
    currency = "USD"
    shipment_state = ShipmentState.PENDING


class PaymentFactory(factory.django.DjangoModelFactory):
    """
    Factory for creating Payment instances.

    Default creates a CHECKOUT payment for the full order total with no
    funding checkout.

    Example:
        # Payment funded by a checkout
        payment = PaymentFactory(source=checkout, state=PaymentState.PENDING)
    """

    class Meta:
        model = Payment

    order = factory.SubFactory(OrderFactory)
    amount = factory.LazyAttribute(lambda o: o.order.total)
    state = PaymentState.CHECKOUT
    source = None
