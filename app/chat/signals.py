"""
Django signals for chat.

Keeps Conversation.last_message_at in step with message inserts so
conversation lists can be ordered by recent activity.

Related files:
    - apps.py: Signal import in ready()
"""

import logging

from django.db.models import Q
from django.db.models.signals import post_save
from django.dispatch import receiver

from chat.models import Conversation, Message

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Message)
def update_conversation_last_message(sender, instance, created, **kwargs):
    """
    Move last_message_at forward to the new message's timestamp.

    A single conditional UPDATE, so an older message saved late (imports,
    backfills) never moves the timestamp back.
    """
    if not created or kwargs.get("raw"):
        return

    updated = (
        Conversation.objects.filter(pk=instance.conversation_id)
        .filter(
            Q(last_message_at__isnull=True)
            | Q(last_message_at__lt=instance.created_at)
        )
        .update(last_message_at=instance.created_at)
    )
    if updated:
        logger.debug(
            f"Conversation {instance.conversation_id} last_message_at "
            f"set to {instance.created_at}"
        )
