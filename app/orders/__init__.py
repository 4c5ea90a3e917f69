"""
Orders app: the Order and Payment records that checkouts fund.

The checkout reconciliation engine reads and advances these records but does
not own their lifecycle:
- Order: order total and shipment readiness
- Payment: payment lifecycle (django-fsm), funded by a BraintreeCheckout

Usage:
    from orders.models import Order, Payment
    from orders.states import PaymentState

    payment = order.payments.get(state=PaymentState.FAILED)
    payment.reopen()
    payment.save()
    order.sync_shipments()
"""
