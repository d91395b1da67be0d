"""
URL configuration for user endpoints.

URL structure:
    /api/v1/users/search/?query=   - Search users by name or email (GET)
    /api/v1/users/photo/           - Upload profile photo (PATCH, multipart)
    /api/v1/users/me/              - Own account (GET/PATCH/DELETE)
    /api/v1/users/me/password/     - Change password (PATCH)
    /api/v1/users/me/profile/      - Update profile (PATCH)
    /api/v1/users/me/{field}/      - One field of own account (GET)
    /api/v1/users/{user_id}/       - Public user data (GET)

Order matters: the literal segments must come before the catch-all
{field} and {user_id} patterns.
"""

from django.urls import path

from authentication.views import (
    CurrentUserFieldView,
    CurrentUserView,
    PasswordUpdateView,
    PhotoUploadView,
    ProfileUpdateView,
    UserDetailView,
    UserSearchView,
)

app_name = "users"

urlpatterns = [
    path("search/", UserSearchView.as_view(), name="search"),
    path("photo/", PhotoUploadView.as_view(), name="photo"),
    path("me/", CurrentUserView.as_view(), name="me"),
    path("me/password/", PasswordUpdateView.as_view(), name="password"),
    path("me/profile/", ProfileUpdateView.as_view(), name="profile"),
    path("me/<str:field>/", CurrentUserFieldView.as_view(), name="field"),
    path("<str:user_id>/", UserDetailView.as_view(), name="detail"),
]
