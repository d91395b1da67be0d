"""
Root URL configuration for the chat backend.

URL Structure:
    /                                      - ReDoc API documentation
    /schema/                               - OpenAPI schema
    /admin/                                - Django admin interface
    /health/                               - Health check endpoint
    /api/v1/auth/                          - signup, login, logout, me
    /api/v1/users/                         - search, profile, password, photo
    /api/v1/rooms/                         - rooms and room messages
    /api/v1/messages/{id}/                 - edit/delete a message by id
    ws/chat/                               - realtime gateway (see chat.routing)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("auth/", include("authentication.urls")),
    path("users/", include("authentication.user_urls")),
    path("", include("chat.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("admin/", admin.site.urls),
    path("health/", health_check, name="health_check"),
    path("api/v1/", include(api_v1_patterns)),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

admin.site.site_header = "Chat Admin"
admin.site.site_title = "Chat Admin Portal"
admin.site.index_title = "Users, rooms and messages"
