import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="BraintreeCheckout",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "state",
                    models.CharField(
                        choices=[
                            ("authorizing", "Authorizing"),
                            ("authorized", "Authorized"),
                            ("submitted_for_settlement", "Submitted For Settlement"),
                            ("settling", "Settling"),
                            ("settlement_pending", "Settlement Pending"),
                            ("settlement_confirmed", "Settlement Confirmed"),
                            ("authorization_expired", "Authorization Expired"),
                            ("processor_declined", "Processor Declined"),
                            ("gateway_rejected", "Gateway Rejected"),
                            ("failed", "Failed"),
                            ("voided", "Voided"),
                            ("settled", "Settled"),
                            ("settlement_declined", "Settlement Declined"),
                            ("refunded", "Refunded"),
                            ("released", "Released"),
                        ],
                        db_index=True,
                        default="authorizing",
                        help_text="Braintree transaction status",
                        max_length=32,
                    ),
                ),
                (
                    "transaction_id",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        default="",
                        help_text="Braintree transaction id",
                        max_length=64,
                    ),
                ),
                (
                    "paypal_email",
                    models.EmailField(
                        blank=True,
                        help_text="Payer email for PayPal checkouts",
                        max_length=254,
                        null=True,
                    ),
                ),
                (
                    "braintree_card_type",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Normalized card brand (e.g., visa, master, american_express)",
                        max_length=32,
                    ),
                ),
                (
                    "braintree_last_digits",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Last digits of the card number",
                        max_length=4,
                    ),
                ),
            ],
            options={
                "verbose_name": "Braintree Checkout",
                "verbose_name_plural": "Braintree Checkouts",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["state", "created_at"],
                        name="checkout_state_created_idx",
                    )
                ],
            },
        ),
    ]
