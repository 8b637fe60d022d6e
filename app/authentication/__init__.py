"""
Authentication application.

Provides the email-based User model and the JWT middleware that
authenticates WebSocket connections.

Usage:
    from authentication.models import User
    from authentication.middleware import JWTAuthMiddleware
"""
