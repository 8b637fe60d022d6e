"""
Tests for authentication app.

This package contains test modules for:
- test_middleware.py: JWT WebSocket authentication
- test_managers.py: UserManager creation rules

Usage:
    pytest authentication/tests/
"""
