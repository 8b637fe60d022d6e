"""
Chat models referenced by the read-state subsystem.

Sending, editing and membership management live in the messaging service;
this app only owns the tables that read-state queries join against.

Models:
    Conversation: Container for messages between participants
    Participant: User participation in a conversation
    Message: Individual message within a conversation

Design Decisions:
    - Participant records are immutable; leaving sets left_at and a rejoin
      creates a new record
    - Messages are totally ordered within a conversation by (created_at, id),
      which is also the order read markers compare against
    - Message.created_at is assignable so imported history keeps its timestamps
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.models import BaseModel


class ConversationType(models.TextChoices):
    """
    Type of conversation.

    DIRECT: Exactly two participants
    GROUP: Two or more participants
    """

    DIRECT = "direct", "Direct Message"
    GROUP = "group", "Group"


class MessageType(models.TextChoices):
    """
    Type of message content.

    TEXT: User-authored text message
    SYSTEM: Auto-generated event message with no sender
    """

    TEXT = "text", "Text"
    SYSTEM = "system", "System"


class Conversation(BaseModel):
    """
    A conversation between two or more users.

    Fields:
        conversation_type: Type of conversation (direct or group)
        title: Group title (empty string for direct conversations)
        created_by: User who created the conversation (nullable)
        last_message_at: Timestamp of most recent message (for sorting)

    Relationships:
        participants: All Participant records for this conversation
        messages: All Message records for this conversation
        read_markers: ReadMarker records (readstate app)
    """

    conversation_type = models.CharField(
        max_length=10,
        choices=ConversationType.choices,
        default=ConversationType.GROUP,
        db_index=True,
        help_text="Type of conversation (direct or group)",
    )

    title = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Title for group conversations (empty for direct)",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_conversations",
        help_text="User who created this conversation (null for system-created)",
    )

    last_message_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Timestamp of most recent message (for sorting conversation lists)",
    )

    class Meta:
        db_table = "chat_conversation"
        ordering = ["-last_message_at", "-created_at"]

    def __str__(self) -> str:
        """Return human-readable representation."""
        if self.conversation_type == ConversationType.DIRECT:
            return f"Direct({self.pk})"
        if self.title:
            return f"Group: {self.title}"
        return f"Group({self.pk})"

    def get_active_participants(self):
        """
        Get queryset of active participants.

        Returns:
            QuerySet of Participant objects where left_at is NULL
        """
        return self.participants.filter(left_at__isnull=True)


class Participant(BaseModel):
    """
    Tracks user participation in conversations.

    Membership Lifecycle:
        1. User joins: Participant created with left_at=NULL
        2. User leaves: left_at set
        3. User rejoins: NEW Participant record created

    Constraints:
        - UniqueConstraint(conversation, user) WHERE left_at IS NULL:
          Only one active participation per user per conversation
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="participants",
        help_text="Conversation this participation belongs to",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="conversation_participations",
        help_text="User participating in the conversation",
    )

    joined_at = models.DateTimeField(
        default=timezone.now,
        help_text="When the user joined this conversation",
    )

    left_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="When the user left (null if still active)",
    )

    class Meta:
        db_table = "chat_participant"
        ordering = ["joined_at"]
        indexes = [
            # Active participants in a conversation
            models.Index(
                fields=["conversation", "left_at"],
                name="chat_part_conv_active_idx",
            ),
            # User's active conversations
            models.Index(
                fields=["user", "left_at"],
                name="chat_part_user_active_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["conversation", "user"],
                condition=Q(left_at__isnull=True),
                name="unique_active_participation",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        status = "active" if self.is_active else "left"
        return f"Participant: {self.user_id} in {self.conversation_id} [{status}]"

    @property
    def is_active(self) -> bool:
        """Check if this participation is currently active."""
        return self.left_at is None


class Message(BaseModel):
    """
    A message within a conversation.

    Ordering:
        (created_at, id) ascending. Two messages sharing a timestamp are
        ordered by id, so the pair is unique and totally ordered.

    Fields:
        conversation: Conversation this message belongs to
        sender: User who sent the message (NULL for system messages)
        message_type: Type of message (text or system)
        content: Message text
    """

    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="When the message was sent",
    )

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Conversation this message belongs to",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_messages",
        help_text="User who sent this message (null for system messages)",
    )

    message_type = models.CharField(
        max_length=10,
        choices=MessageType.choices,
        default=MessageType.TEXT,
        help_text="Type of message (text or system)",
    )

    content = models.TextField(
        blank=True,
        default="",
        help_text="Message content",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            # Unread counting walks messages after a marker
            models.Index(
                fields=["conversation", "created_at", "id"],
                name="chat_msg_conv_cursor_idx",
            ),
            models.Index(
                fields=["sender", "-created_at"],
                name="chat_msg_sender_idx",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        sender_str = f"User {self.sender_id}" if self.sender_id else "System"
        content_preview = (
            self.content[:50] + "..." if len(self.content) > 50 else self.content
        )
        return f"{sender_str}: {content_preview}"

    @property
    def is_system_message(self) -> bool:
        """Check if this is a system-generated message."""
        return self.message_type == MessageType.SYSTEM
