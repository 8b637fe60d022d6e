"""
Django signals for read state.

New messages schedule an unread count broadcast once the inserting
transaction commits, so the task never reads a message that might
still roll back.

Related files:
    - apps.py: Signal import in ready()
    - tasks.py: broadcast_message_unread_counts
"""

import logging

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from chat.models import Message
from readstate import settings as read_state_settings

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Message)
def schedule_unread_broadcast(sender, instance, created, **kwargs):
    """
    Queue an unread broadcast for a newly created message.

    Skipped for edits, raw fixture loads and when
    READ_STATE_BROADCAST_ON_MESSAGE is off.
    """
    if not created or kwargs.get("raw"):
        return
    if not read_state_settings.broadcast_on_message():
        return

    from readstate.tasks import broadcast_message_unread_counts

    message_id = instance.id
    transaction.on_commit(lambda: broadcast_message_unread_counts.delay(message_id))
    logger.debug(f"Scheduled unread broadcast for message {message_id}")
