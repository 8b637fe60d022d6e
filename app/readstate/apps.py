"""
Read-state application configuration.
"""

from django.apps import AppConfig


class ReadStateConfig(AppConfig):
    """Configuration for the read-state application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "readstate"
    verbose_name = "Read State"

    def ready(self):
        """Connect the message signal handlers."""
        from readstate import signals  # noqa: F401
