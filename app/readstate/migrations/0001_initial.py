import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("chat", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ReadMarker",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "read_through_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="Timestamp of the last message read (null if none)",
                        null=True,
                    ),
                ),
                (
                    "read_through_message_id",
                    models.BigIntegerField(
                        blank=True,
                        help_text="ID of the last message read (null if none)",
                        null=True,
                    ),
                ),
                (
                    "conversation",
                    models.ForeignKey(
                        help_text="Conversation this marker belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="read_markers",
                        to="chat.conversation",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="User whose read position this is",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="read_markers",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "readstate_read_marker",
                "ordering": ["-updated_at"],
                "indexes": [
                    models.Index(
                        fields=["user", "conversation"],
                        name="readstate_marker_user_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("conversation", "user"),
                        name="unique_read_marker_per_user",
                    ),
                ],
            },
        ),
    ]
