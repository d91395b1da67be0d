"""
Tests for chat app.

This package contains test modules for:
- test_authorization.py: RoomAccessControl tests
- test_services.py: RoomService and MessageService tests
- test_views.py: REST API endpoint tests
- test_consumers.py: WebSocket consumer tests

Usage:
    pytest chat/tests/
    pytest chat/tests/test_consumers.py
"""
