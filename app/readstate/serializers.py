"""
Serializers for the read-state API.

All serializers here are output-only: they render the value types from
readstate.types. Request bodies carry no fields; the conversation comes
from the URL and the user from the authenticated request.

Serializers:
    ReadPointSerializer: Marker position
    MarkReadResultSerializer: Response of POST .../read/
    ReadStateSnapshotSerializer: Response of GET .../unread/
    UnreadCountsSerializer: Response of GET /unread/
    ErrorResponseSerializer: Error body shared by all endpoints
"""

from rest_framework import serializers


class ReadPointSerializer(serializers.Serializer):
    """Position of the last read message."""

    created_at = serializers.DateTimeField()
    message_id = serializers.IntegerField()


class MarkReadResultSerializer(serializers.Serializer):
    conversation_id = serializers.IntegerField()
    read_through = ReadPointSerializer(allow_null=True)
    advanced = serializers.BooleanField()
    unread_count = serializers.IntegerField(min_value=0)
    status = serializers.SerializerMethodField()

    def get_status(self, obj) -> str:
        return obj.status.value


class ReadStateSnapshotSerializer(serializers.Serializer):
    conversation_id = serializers.IntegerField()
    unread_count = serializers.IntegerField(min_value=0)
    read_through = ReadPointSerializer(allow_null=True)
    status = serializers.SerializerMethodField()

    def get_status(self, obj) -> str:
        return obj.status.value


class UnreadCountsSerializer(serializers.Serializer):
    """
    Unread counts for all of a user's conversations.

    Input is a dict {conversation_id: count}; the mapping is rendered
    with string keys as JSON requires.
    """

    counts = serializers.DictField(child=serializers.IntegerField(min_value=0))
    total = serializers.IntegerField(min_value=0)

    def to_representation(self, instance):
        counts = {str(key): value for key, value in instance.items()}
        return {"counts": counts, "total": sum(instance.values())}


class ErrorResponseSerializer(serializers.Serializer):
    """
    Error body: ServiceResult.to_response() for 404,
    BaseApplicationError.to_dict() for 503.
    """

    success = serializers.BooleanField(required=False)
    error = serializers.CharField()
    error_code = serializers.CharField()
    details = serializers.DictField(required=False)
