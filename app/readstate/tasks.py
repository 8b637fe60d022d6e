"""
Celery tasks for read state.

Related files:
    - signals.py: Schedules broadcast_message_unread_counts on message insert
    - services.py: ReadStateService.notify_new_message

Usage:
    from readstate.tasks import broadcast_message_unread_counts

    broadcast_message_unread_counts.delay(message_id)
"""

import logging

from celery import shared_task

from core.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(StorageUnavailableError,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def broadcast_message_unread_counts(self, message_id: int) -> int:
    """
    Push updated unread counts after a new message.

    Every active participant except the sender gets their recomputed count
    for the message's conversation.

    Args:
        message_id: ID of the new message

    Returns:
        Number of notifications sent
    """
    from chat.models import Message
    from readstate.services import get_read_state_service

    message = (
        Message.objects.filter(id=message_id)
        .values("conversation_id", "sender_id")
        .first()
    )
    if message is None:
        logger.warning(f"Message {message_id} not found, skipping unread broadcast")
        return 0

    service = get_read_state_service()
    return service.notify_new_message(
        message["conversation_id"],
        message["sender_id"],
    )
