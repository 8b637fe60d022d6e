"""
Tests for readstate app.

Usage:
    pytest readstate/tests/
"""
