"""
Celery configuration for the read-state service.

Celery runs the unread count fan-out after new messages
(readstate.tasks.broadcast_message_unread_counts) so that message inserts
never wait on the channel layer.

Redis is used as both the message broker and result backend.
Tasks are auto-discovered from all installed Django apps.

Usage:
    celery -A config worker -l info
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Celery will look for a tasks.py module in each installed app
app.autodiscover_tasks()
