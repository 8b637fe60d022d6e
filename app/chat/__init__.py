"""
Chat app: conversations, participants and messages.

Related apps:
    - authentication: User model for participants
    - readstate: Read markers and unread counts built on these tables

Usage:
    from chat.models import Conversation, Message, Participant
"""
