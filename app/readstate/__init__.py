"""
Read-state app: read markers, unread counts and badge updates.

This app handles:
- Per (conversation, user) read markers that only move forward
- Unread counts derived from messages after the marker
- Mark-read from REST and WebSocket clients
- Pushing new counts to a user's open sessions

Related apps:
    - chat: Conversation, Participant and Message tables
    - authentication: User model and WebSocket JWT middleware

Usage:
    from readstate.services import get_read_state_service

    service = get_read_state_service()
    result = service.mark_read(conversation_id, user.id)
    counts = service.get_unread_counts_for_user(user.id).data
"""
