"""
Test configuration and fixtures for chat tests.

This module provides:
- User fixtures for the usual roles (creator, member, outsider)
- Room and message fixtures
- API client helpers for authenticated requests
- A mocked broadcaster for REST tests
- A flushed in-memory channel layer for websocket tests

Usage:
    def test_example(room, creator_client):
        response = creator_client.get(f'/api/v1/rooms/{room.id}/')
        assert response.status_code == 200
"""

from unittest.mock import patch

import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from rest_framework.test import APIClient

from authentication.tests.factories import UserFactory
from authentication.tokens import TokenService
from chat.tests.factories import MessageFactory, RoomFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def creator(db):
    """User who creates the test room."""
    return UserFactory(name="Creator")


@pytest.fixture
def member(db):
    """User who participates in the test room without owning it."""
    return UserFactory(name="Member")


@pytest.fixture
def outsider(db):
    """User who is not a participant in any test room."""
    return UserFactory(name="Outsider")


# =============================================================================
# Room and Message Fixtures
# =============================================================================


@pytest.fixture
def room(creator, member):
    """Group room created by `creator` with `member` as participant."""
    return RoomFactory(name="General", creator=creator, members=[member])


@pytest.fixture
def message(room, member):
    """Message sent to `room` by `member`."""
    return MessageFactory(room=room, sender=member, content="Hello everyone!")


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def authenticated_client_factory():
    """
    Build API clients that authenticate as a given user.

    Usage:
        client = authenticated_client_factory(some_user)
    """

    def make_client(user):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {TokenService.issue(user)}")
        return client

    return make_client


@pytest.fixture
def creator_client(authenticated_client_factory, creator):
    return authenticated_client_factory(creator)


@pytest.fixture
def member_client(authenticated_client_factory, member):
    return authenticated_client_factory(member)


@pytest.fixture
def outsider_client(authenticated_client_factory, outsider):
    return authenticated_client_factory(outsider)


# =============================================================================
# Realtime Fixtures
# =============================================================================


@pytest.fixture
def mock_broadcast():
    """
    Capture REST-triggered realtime events instead of sending them.

    Yields a dict with the "all" and "room" event mocks and the
    "subscribe", "unsubscribe" and "close" group-membership mocks.
    """
    with (
        patch("chat.views.broadcast_to_all") as to_all,
        patch("chat.views.broadcast_to_room") as to_room,
        patch("chat.views.subscribe_user") as subscribe,
        patch("chat.views.unsubscribe_user") as unsubscribe,
        patch("chat.views.close_room") as close,
    ):
        yield {
            "all": to_all,
            "room": to_room,
            "subscribe": subscribe,
            "unsubscribe": unsubscribe,
            "close": close,
        }


@pytest.fixture(autouse=True)
def flush_channel_layer():
    """Drop groups and queued messages left behind by a previous test."""
    yield
    async_to_sync(get_channel_layer().flush)()
