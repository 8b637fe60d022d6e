"""
URL configuration for the read-state API.

Mounted at /api/v1/read-state/ in config/urls.py.
"""

from django.urls import path

from readstate import views

app_name = "readstate"

urlpatterns = [
    path(
        "conversations/<int:conversation_id>/read/",
        views.MarkConversationReadView.as_view(),
        name="mark-read",
    ),
    path(
        "conversations/<int:conversation_id>/unread/",
        views.ConversationUnreadView.as_view(),
        name="conversation-unread",
    ),
    path(
        "unread/",
        views.UnreadCountsView.as_view(),
        name="unread-counts",
    ),
]
