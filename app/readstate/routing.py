"""
WebSocket URL routing for read state.

URL Patterns:
    ws/unread/ - Unread count updates for the authenticated user

Authentication:
    JWT token should be passed as query parameter: ?token=<jwt_access_token>
    or as the "jwt" subprotocol. See authentication/middleware.py.
"""

from django.urls import path

from readstate import consumers

websocket_urlpatterns = [
    path("ws/unread/", consumers.UnreadCountConsumer.as_asgi()),
]
