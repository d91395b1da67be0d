"""
URL configuration for chat API.

URL Structure:
    Rooms:
        /rooms/                                  GET, POST
        /rooms/me/                               GET
        /rooms/{id}/                             GET, DELETE
        /rooms/{id}/join/                        POST
        /rooms/{id}/leave/                       POST

    Messages:
        /rooms/{id}/messages/                    GET, POST
        /rooms/{id}/messages/{message_id}/       DELETE
        /messages/{id}/                          PATCH, DELETE

All URLs are prefixed with /api/v1/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from chat.views import MessageViewSet, RoomViewSet

router = DefaultRouter()
router.register(r"rooms", RoomViewSet, basename="room")
router.register(r"messages", MessageViewSet, basename="message")

app_name = "chat"

urlpatterns = [
    path("", include(router.urls)),
    # Nested delete that also checks the message belongs to the room
    path(
        "rooms/<str:pk>/messages/<str:message_pk>/",
        RoomViewSet.as_view({"delete": "destroy_message"}),
        name="room-message-detail",
    ),
]
