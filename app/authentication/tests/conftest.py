"""
Test configuration and fixtures for authentication tests.

This module provides:
- Reusable user fixtures
- API client helpers for authenticated requests

Usage:
    def test_example(user, authenticated_client):
        response = authenticated_client.get('/api/v1/users/me/')
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient

from authentication.tests.factories import DEFAULT_PASSWORD, UserFactory
from authentication.tokens import TokenService


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def password():
    """Plain-text password of the users built by UserFactory."""
    return DEFAULT_PASSWORD


@pytest.fixture
def user(db):
    """Create a basic active user with auto-created profile."""
    return UserFactory(name="Alice", email="alice@example.com")


@pytest.fixture
def other_user(db):
    """Create another user for lookup and conflict tests."""
    return UserFactory(name="Bob", email="bob@example.com")


@pytest.fixture
def inactive_user(db):
    """Create a deactivated user."""
    return UserFactory(is_active=False)


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def token(user):
    """Bearer token for the default user."""
    return TokenService.issue(user)


@pytest.fixture
def authenticated_client(token):
    """API client sending the default user's bearer token."""
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client
