"""
Chat application configuration.

Owns conversations, participants and messages. Read tracking lives in
the readstate app.
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"

    def ready(self):
        """Connect the message signal handlers."""
        from chat import signals  # noqa: F401
