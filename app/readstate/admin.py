"""
Django admin configuration for read-state models.

Read markers are read-only here: editing one by hand could move it
backwards, which the store never allows.
"""

from django.contrib import admin

from readstate.models import ReadMarker


@admin.register(ReadMarker)
class ReadMarkerAdmin(admin.ModelAdmin):
    """Read-only admin interface for ReadMarker model."""

    list_display = [
        "id",
        "conversation",
        "user",
        "read_through_message_id",
        "read_through_at",
        "updated_at",
    ]
    list_filter = ["updated_at"]
    search_fields = ["user__email", "conversation__title"]
    raw_id_fields = ["conversation", "user"]
    readonly_fields = [
        "conversation",
        "user",
        "read_through_at",
        "read_through_message_id",
        "created_at",
        "updated_at",
    ]
    ordering = ["-updated_at"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
