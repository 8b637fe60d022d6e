"""
Tests for chat app.

Usage:
    pytest chat/tests/
"""
