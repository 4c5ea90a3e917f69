"""
Celery configuration for the Django application.

Celery runs the checkout reconciliation work outside of request handling:
- The hourly state sync scheduled by django-celery-beat
- On-demand refreshes of a single checkout

This configuration uses Redis as both the message broker and result backend.
Tasks are auto-discovered from the tasks.py module of each installed app.

Usage:
    from checkouts.tasks import refresh_single_checkout

    refresh_single_checkout.delay(str(checkout.id))

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
