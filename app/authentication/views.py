"""
Authentication and user views.

This module provides API views for:
- Signup, login, logout and the current identity (/api/v1/auth/)
- User search, public profiles and self-service account management
  (/api/v1/users/)

Related files:
    - serializers.py: Request/response serialization
    - services.py: Business logic (AuthService, UserService)
    - urls.py, user_urls.py: URL routing

Note:
    Signup, login and me opt out of the default BearerTokenAuthentication.
    Signup and login need no identity; me resolves the token itself so it
    can report "No token provided" and a 404 for a vanished user.
"""

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.serializers import (
    AuthResponseSerializer,
    LoginSerializer,
    PasswordUpdateSerializer,
    PhotoUploadSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    PublicUserSerializer,
    SignupSerializer,
    UserSerializer,
    UserSummarySerializer,
    UserUpdateSerializer,
)
from authentication.services import AuthService, UserService


def auth_response(user, token, status_code):
    """Body shared by signup and login."""
    return Response(
        {
            "status": "success",
            "token": token,
            "user": UserSummarySerializer(user).data,
        },
        status=status_code,
    )


# =============================================================================
# Auth Views
# =============================================================================


class SignupView(APIView):
    """
    Create an account.

    POST /api/v1/auth/signup/

    Request body:
        {"name": "A", "email": "a@x.com", "password": "123456"}

    Returns:
        201 {"status": "success", "token": "...", "user": {"id", "name", "email"}}
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Sign up",
        tags=["Auth"],
        request=SignupSerializer,
        responses={
            201: AuthResponseSerializer,
            400: OpenApiResponse(description="Missing fields or email already registered"),
        },
    )
    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user, token = AuthService.signup(**serializer.validated_data)
        return auth_response(user, token, status.HTTP_201_CREATED)


class LoginView(APIView):
    """
    Exchange email and password for a bearer token.

    POST /api/v1/auth/login/

    Unknown email and wrong password both answer 401 "Invalid credentials".
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Log in",
        tags=["Auth"],
        request=LoginSerializer,
        responses={
            200: AuthResponseSerializer,
            400: OpenApiResponse(description="Missing email or password"),
            401: OpenApiResponse(description="Invalid credentials"),
        },
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user, token = AuthService.login(**serializer.validated_data)
        return auth_response(user, token, status.HTTP_200_OK)


class LogoutView(APIView):
    """POST /api/v1/auth/logout/"""

    @extend_schema(summary="Log out", tags=["Auth"], request=None)
    def post(self, request):
        message = AuthService.logout(request.user)
        return Response({"status": "success", "message": message})


class MeView(APIView):
    """
    Return the identity behind the bearer token.

    GET /api/v1/auth/me/

    Errors:
        401 "No token provided"
        401 "Token has expired" / "Invalid token"
        404 "User not found"
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Current user",
        tags=["Auth"],
        responses={200: UserSerializer},
    )
    def get(self, request):
        user = AuthService.user_from_authorization(request.META.get("HTTP_AUTHORIZATION"))
        return Response({"status": "success", "user": UserSerializer(user).data})


# =============================================================================
# User Views
# =============================================================================


class UserSearchView(APIView):
    """GET /api/v1/users/search/?query=..."""

    @extend_schema(
        summary="Search users",
        description="Case-insensitive substring match on name or email.",
        tags=["Users"],
        parameters=[OpenApiParameter("query", str, required=True)],
        responses={200: PublicUserSerializer(many=True)},
    )
    def get(self, request):
        users = UserService.search(request.query_params.get("query"))
        return Response(
            {"status": "success", "data": PublicUserSerializer(users, many=True).data}
        )


class UserDetailView(APIView):
    """GET /api/v1/users/{user_id}/"""

    @extend_schema(summary="Get a user", tags=["Users"], responses={200: PublicUserSerializer})
    def get(self, request, user_id):
        user = UserService.get_user(user_id)
        return Response({"status": "success", "data": PublicUserSerializer(user).data})


class CurrentUserView(APIView):
    """
    The caller's own account.

    GET    /api/v1/users/me/  - full account
    PATCH  /api/v1/users/me/  - name, email, addresses, mfa_settings
    DELETE /api/v1/users/me/  - deactivate (204)
    """

    @extend_schema(summary="Get my account", tags=["Users"], responses={200: UserSerializer})
    def get(self, request):
        return Response({"status": "success", "data": UserSerializer(request.user).data})

    @extend_schema(
        summary="Update my account",
        tags=["Users"],
        request=UserUpdateSerializer,
        responses={200: UserSerializer},
    )
    def patch(self, request):
        serializer = UserUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserService.update_account(request.user, serializer.validated_data)
        return Response({"status": "success", "data": UserSerializer(user).data})

    @extend_schema(summary="Deactivate my account", tags=["Users"], responses={204: None})
    def delete(self, request):
        UserService.deactivate(request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CurrentUserFieldView(APIView):
    """
    One attribute of the caller's account.

    GET /api/v1/users/me/{field}/

    Readable fields: name, email, profile, friends, addresses.
    """

    @extend_schema(summary="Get one field of my account", tags=["Users"])
    def get(self, request, field):
        UserService.check_readable_field(field)
        data = UserSerializer(request.user).data[field]
        return Response({"status": "success", "data": data})


class PasswordUpdateView(APIView):
    """PATCH /api/v1/users/me/password/"""

    @extend_schema(
        summary="Change my password",
        tags=["Users"],
        request=PasswordUpdateSerializer,
        responses={400: OpenApiResponse(description="Old password is incorrect")},
    )
    def patch(self, request):
        serializer = PasswordUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        UserService.change_password(
            request.user,
            serializer.validated_data["old_password"],
            serializer.validated_data["new_password"],
        )
        return Response({"status": "success", "message": "Password updated successfully"})


class ProfileUpdateView(APIView):
    """PATCH /api/v1/users/me/profile/"""

    @extend_schema(
        summary="Update my profile",
        tags=["Users"],
        request=ProfileUpdateSerializer,
        responses={200: ProfileSerializer},
    )
    def patch(self, request):
        serializer = ProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        profile = UserService.update_profile(request.user, serializer.validated_data)
        return Response({"status": "success", "data": ProfileSerializer(profile).data})


class PhotoUploadView(APIView):
    """
    PATCH /api/v1/users/photo/

    Multipart form with a single "profile_picture" image file.
    """

    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        summary="Upload my profile photo",
        tags=["Users"],
        request={"multipart/form-data": PhotoUploadSerializer},
        responses={200: ProfileSerializer},
    )
    def patch(self, request):
        serializer = PhotoUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        profile = UserService.upload_photo(
            request.user, serializer.validated_data["profile_picture"]
        )
        return Response({"status": "success", "data": ProfileSerializer(profile).data})
