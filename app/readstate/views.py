"""
REST API views for read state.

URL Structure:
    /api/v1/read-state/conversations/{id}/read/     POST
    /api/v1/read-state/conversations/{id}/unread/   GET
    /api/v1/read-state/unread/                      GET

Every view acts on request.user only; there is no way to read or move
another user's marker.

Status Codes:
    200: Success
    401: Not authenticated
    404: Not an active participant (NOT_PARTICIPANT)
    503: Storage unavailable, safe to retry (STORAGE_UNAVAILABLE)
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import StorageUnavailableError
from readstate.serializers import (
    ErrorResponseSerializer,
    MarkReadResultSerializer,
    ReadStateSnapshotSerializer,
    UnreadCountsSerializer,
)
from readstate.services import get_read_state_service

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    404: OpenApiResponse(
        response=ErrorResponseSerializer,
        description="Not a participant in this conversation",
    ),
    503: OpenApiResponse(
        response=ErrorResponseSerializer,
        description="Read state storage temporarily unavailable",
    ),
}


def failure_response(result) -> Response:
    return Response(result.to_response(), status=status.HTTP_404_NOT_FOUND)


def unavailable_response(exc: StorageUnavailableError) -> Response:
    return Response(
        exc.to_dict(),
        status=status.HTTP_503_SERVICE_UNAVAILABLE,
        headers={"Retry-After": "1"},
    )


class ReadStateAPIView(APIView):
    """Base view: authenticated, with a per-request ReadStateService."""

    permission_classes = [IsAuthenticated]

    def get_service(self):
        return get_read_state_service()

    def handle_exception(self, exc):
        if isinstance(exc, StorageUnavailableError):
            logger.warning(f"Read state unavailable for {self.request.path}: {exc}")
            return unavailable_response(exc)
        return super().handle_exception(exc)


class MarkConversationReadView(ReadStateAPIView):
    """
    Mark a conversation as read for the current user.

    POST /api/v1/read-state/conversations/{conversation_id}/read/

    Moves the user's marker to the newest message. Repeating the call is
    harmless; "advanced" tells whether anything changed.
    """

    @extend_schema(
        operation_id="mark_conversation_read",
        summary="Mark conversation as read",
        request=None,
        responses={200: MarkReadResultSerializer, **ERROR_RESPONSES},
        tags=["Read State"],
    )
    def post(self, request, conversation_id: int):
        result = self.get_service().mark_read(conversation_id, request.user.id)
        if not result.success:
            return failure_response(result)
        return Response(MarkReadResultSerializer(result.data).data)


class ConversationUnreadView(ReadStateAPIView):
    """
    Unread count and read status for one conversation.

    GET /api/v1/read-state/conversations/{conversation_id}/unread/
    """

    @extend_schema(
        operation_id="get_conversation_unread",
        summary="Get conversation unread count",
        responses={200: ReadStateSnapshotSerializer, **ERROR_RESPONSES},
        tags=["Read State"],
    )
    def get(self, request, conversation_id: int):
        result = self.get_service().get_read_state(conversation_id, request.user.id)
        if not result.success:
            return failure_response(result)
        return Response(ReadStateSnapshotSerializer(result.data).data)


class UnreadCountsView(ReadStateAPIView):
    """
    Unread counts for every conversation of the current user.

    GET /api/v1/read-state/unread/

    Example Response:
        {"counts": {"12": 3, "15": 0}, "total": 3}
    """

    @extend_schema(
        operation_id="list_unread_counts",
        summary="Get unread counts for all conversations",
        responses={200: UnreadCountsSerializer, 503: ERROR_RESPONSES[503]},
        tags=["Read State"],
    )
    def get(self, request):
        result = self.get_service().get_unread_counts_for_user(request.user.id)
        return Response(UnreadCountsSerializer(result.data).data)
