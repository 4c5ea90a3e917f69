"""
Add celery-beat schedule for checkout state sync.

This migration creates the periodic task schedule for the
update_checkout_states task, which runs every hour to sync non-final
checkouts with Braintree and recover failed orders.
"""

from django.db import migrations


def create_periodic_task(apps, schema_editor):
    """Create the periodic task for checkout state sync."""
    IntervalSchedule = apps.get_model("django_celery_beat", "IntervalSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    # Create interval schedule: every hour
    schedule, _ = IntervalSchedule.objects.get_or_create(
        every=1,
        period="hours",
    )

    PeriodicTask.objects.get_or_create(
        name="Update Braintree Checkout States",
        defaults={
            "task": "checkouts.workers.reconciliation_worker.update_checkout_states",
            "interval": schedule,
            "enabled": True,
            "description": (
                "Syncs non-final Braintree checkouts with the gateway and "
                "recovers failed orders whose PayPal checkout settled."
            ),
        },
    )


def remove_periodic_task(apps, schema_editor):
    """Remove the periodic task on migration rollback."""
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    PeriodicTask.objects.filter(
        name="Update Braintree Checkout States",
    ).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("checkouts", "0001_initial"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_task, remove_periodic_task),
    ]
