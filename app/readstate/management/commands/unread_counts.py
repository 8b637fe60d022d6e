"""
Inspect and reconcile a user's unread counts.

Usage:
    python manage.py unread_counts 42
    python manage.py unread_counts 42 --conversation 7
    python manage.py unread_counts 42 --conversation 7 --mark-read
    python manage.py unread_counts 42 --conversation 7 -v 2   # list unread messages

With --mark-read the conversation is marked read and the command fails if
the count does not drop to zero afterwards.
"""

from django.core.management.base import BaseCommand, CommandError

from core.exceptions import StorageUnavailableError
from readstate.services import get_read_state_service


class Command(BaseCommand):
    help = "Show unread counts for a user, optionally marking a conversation read."

    def add_arguments(self, parser):
        parser.add_argument("user_id", type=int)
        parser.add_argument(
            "--conversation",
            type=int,
            dest="conversation_id",
            help="Limit output to one conversation",
        )
        parser.add_argument(
            "--mark-read",
            action="store_true",
            help="Mark the conversation read and verify its count is zero",
        )

    def handle(self, *args, **options):
        user_id = options["user_id"]
        conversation_id = options["conversation_id"]
        service = get_read_state_service()

        if options["mark_read"] and conversation_id is None:
            raise CommandError("--mark-read requires --conversation")

        try:
            if conversation_id is None:
                self._show_all(service, user_id)
            else:
                self._show_one(service, conversation_id, user_id, options["mark_read"])
                if options["verbosity"] >= 2 and not options["mark_read"]:
                    self._show_messages(service, conversation_id, user_id)
        except StorageUnavailableError as e:
            raise CommandError(str(e)) from e

    def _show_all(self, service, user_id):
        counts = service.get_unread_counts_for_user(user_id).data
        if not counts:
            self.stdout.write(f"User {user_id} has no active conversations")
            return

        for conversation_id, count in sorted(counts.items()):
            self.stdout.write(f"conversation {conversation_id}: {count}")
        self.stdout.write(f"total: {sum(counts.values())}")

    def _show_one(self, service, conversation_id, user_id, mark_read):
        result = service.get_read_state(conversation_id, user_id)
        if not result.success:
            raise CommandError(f"{result.error} ({result.error_code})")

        snapshot = result.data
        self.stdout.write(
            f"conversation {conversation_id}: {snapshot.unread_count} "
            f"({snapshot.status.value})"
        )
        if not mark_read:
            return

        marked = service.mark_read(conversation_id, user_id)
        if not marked.success:
            raise CommandError(f"{marked.error} ({marked.error_code})")
        if marked.data.unread_count != 0:
            raise CommandError(
                f"Count is {marked.data.unread_count} after marking read, expected 0"
            )
        self.stdout.write(
            self.style.SUCCESS(
                f"Marked conversation {conversation_id} read "
                f"(advanced={marked.data.advanced})"
            )
        )

    def _show_messages(self, service, conversation_id, user_id):
        result = service.get_unread_messages(conversation_id, user_id)
        for message in result.data:
            sender = message.sender_id if message.sender_id is not None else "system"
            self.stdout.write(
                f"  #{message.id} {message.created_at.isoformat()} from {sender}"
            )
