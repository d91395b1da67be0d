"""
Tests for authentication app.

This package contains test modules for:
- test_tokens.py: TokenService and bearer header parsing
- test_services.py: AuthService and UserService tests
- test_views.py: Auth and user API endpoint tests
- test_tasks.py: Celery task tests

Usage:
    pytest authentication/tests/
    pytest authentication/tests/test_views.py
"""
