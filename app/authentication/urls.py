"""
URL configuration for authentication endpoints.

URL structure:
    /api/v1/auth/signup/    - Create account, returns token (POST)
    /api/v1/auth/login/     - Email/password login, returns token (POST)
    /api/v1/auth/logout/    - Logout (POST)
    /api/v1/auth/me/        - Identity behind the bearer token (GET)

User management lives in user_urls.py under /api/v1/users/.
"""

from django.urls import path

from authentication.views import LoginView, LogoutView, MeView, SignupView

app_name = "authentication"

urlpatterns = [
    path("signup/", SignupView.as_view(), name="signup"),
    path("login/", LoginView.as_view(), name="login"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),
]
