"""
Celery configuration for the livestock supply chain project.

DJANGO_SETTINGS_MODULE is set before the app is created so Celery reads
the Django settings (``CELERY_`` prefix).  ``CELERY_BEAT_SCHEDULE`` runs
``core.publish_outbox_events`` periodically.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("livestock")

# Read Django settings with the CELERY_ prefix
app.config_from_object("django.conf:settings", namespace="CELERY")

# Discover tasks.py in every installed app
app.autodiscover_tasks()
