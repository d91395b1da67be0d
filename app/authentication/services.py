"""
Authentication services.

This module provides the business logic behind the auth and user endpoints:
- AuthService: signup, login, logout, resolving the caller of /auth/me
- UserService: search, public lookup, account/profile/password updates,
  photo upload, deactivation, one-time code housekeeping

Related files:
    - models.py: User, Profile, Address
    - tokens.py: TokenService used to issue and verify bearer tokens
    - tasks.py: Periodic cleanup built on UserService

Security:
    - Login answers "Invalid credentials" for both unknown email and wrong
      password so accounts cannot be enumerated
    - Deactivated accounts cannot log in
"""

from __future__ import annotations

import os
import uuid
from typing import TYPE_CHECKING

from django.contrib.auth.models import update_last_login
from django.core.files.storage import default_storage
from django.db import IntegrityError
from django.db.models import Q
from django.utils import timezone

from authentication.models import Address, Profile, User
from authentication.tokens import TokenService, parse_bearer
from core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from core.services import BaseService

if TYPE_CHECKING:
    from typing import Any

    from django.core.files.uploadedfile import UploadedFile
    from django.db.models import QuerySet


class AuthService(BaseService):
    """
    Signup, login and token-based identity resolution.

    Usage:
        from authentication.services import AuthService

        user, token = AuthService.signup("A", "a@x.com", "123456")
        user, token = AuthService.login("a@x.com", "123456")
    """

    INVALID_CREDENTIALS = "Invalid credentials"

    @classmethod
    def signup(cls, name: str, email: str, password: str) -> tuple[User, str]:
        """
        Create an account and issue its first token.

        Args:
            name: Display name
            email: Login email, must not be registered yet
            password: Plain-text password, hashed before persistence

        Returns:
            Tuple of (user, token)

        Raises:
            ConflictError: Email already registered
        """
        email = User.objects.normalize_email(email)
        if User.objects.filter(email__iexact=email).exists():
            raise ConflictError(
                "User with this email already exists",
                error_code="EMAIL_EXISTS",
            )

        try:
            with cls.atomic():
                user = User.objects.create_user(email=email, password=password, name=name)
        except IntegrityError:
            # Lost a race against a concurrent signup with the same email
            raise ConflictError(
                "User with this email already exists",
                error_code="EMAIL_EXISTS",
            )

        cls.get_logger().info(f"User signed up: {user.id}")
        return user, TokenService.issue(user)

    @classmethod
    def login(cls, email: str, password: str) -> tuple[User, str]:
        """
        Check credentials and issue a token.

        Raises:
            AuthenticationError: Unknown email, wrong password or deactivated
                account, all with the same message
        """
        user = User.objects.filter(email__iexact=email.strip()).first()
        if user is None or not user.is_active or not user.check_password(password):
            cls.get_logger().info("Failed login attempt")
            raise AuthenticationError(cls.INVALID_CREDENTIALS, error_code="INVALID_CREDENTIALS")

        update_last_login(None, user)
        cls.get_logger().info(f"User logged in: {user.id}")
        return user, TokenService.issue(user)

    @classmethod
    def logout(cls, user: User) -> str:
        """
        Log the caller out.

        Tokens are stateless, so nothing is revoked server-side; the client
        drops its token.
        """
        cls.get_logger().info(f"User logged out: {user.id}")
        return "Logged out successfully"

    @classmethod
    def user_from_authorization(cls, header: str | None) -> User:
        """
        Resolve the caller of /auth/me from its Authorization header.

        This endpoint reports its own messages, which differ from the
        default bearer authentication class.

        Raises:
            AuthenticationError: No token provided (401)
            ExpiredCredential / MalformedCredential: Token rejected (401)
            NotFoundError: Token owner no longer exists (404)
        """
        token = parse_bearer(header)
        if token is None:
            raise AuthenticationError("No token provided", error_code="TOKEN_MISSING")

        user_id = TokenService.verify(token)
        user = User.objects.active().filter(id=user_id).first()
        if user is None:
            raise NotFoundError("User not found", error_code="USER_NOT_FOUND")
        return user


class UserService(BaseService):
    """
    Operations on user accounts and profiles.

    Methods:
        search: Case-insensitive substring match on name or email
        get_user: Active user by id
        get_field: One allowed attribute of a user
        update_account: Name, email, addresses, multi-factor settings
        change_password: Verify old password, set new one
        update_profile: Bio, interests, picture URL
        upload_photo: Store an image and point the profile at it
        deactivate: Soft delete
        clear_expired_codes: Blank out one-time codes past their expiry
    """

    READABLE_FIELDS = ("name", "email", "profile", "friends", "addresses")
    PHOTO_DIRECTORY = "profile_pictures"

    @classmethod
    def search(cls, query: str | None) -> QuerySet[User]:
        """
        Find active users whose name or email contains the query.

        An empty query matches nobody rather than everybody.
        """
        query = (query or "").strip()
        if not query:
            return User.objects.none()
        return (
            User.objects.active()
            .filter(Q(name__icontains=query) | Q(email__icontains=query))
            .select_related("profile")
            .order_by("name")
        )

    @classmethod
    def get_user(cls, user_id: Any) -> User:
        """
        Raises:
            NotFoundError: No active user with this id
        """
        try:
            user_id = uuid.UUID(str(user_id))
        except ValueError:
            raise NotFoundError("User not found", error_code="USER_NOT_FOUND")

        user = User.objects.active().select_related("profile").filter(id=user_id).first()
        if user is None:
            raise NotFoundError("User not found", error_code="USER_NOT_FOUND")
        return user

    @classmethod
    def check_readable_field(cls, field: str) -> None:
        """
        Raises:
            ValidationError: Field is not one of READABLE_FIELDS
        """
        if field not in cls.READABLE_FIELDS:
            raise ValidationError(
                "Field not found or not accessible",
                error_code="FIELD_NOT_ACCESSIBLE",
            )

    @classmethod
    def update_account(cls, user: User, data: dict[str, Any]) -> User:
        """
        Apply a validated UserUpdateSerializer payload.

        Raises:
            ConflictError: New email belongs to someone else
        """
        update_fields = []

        if "name" in data:
            user.name = data["name"]
            update_fields.append("name")

        if "email" in data:
            email = User.objects.normalize_email(data["email"])
            taken = User.objects.filter(email__iexact=email).exclude(id=user.id).exists()
            if taken:
                raise ConflictError(
                    "User with this email already exists",
                    error_code="EMAIL_EXISTS",
                )
            user.email = email
            update_fields.append("email")

        mfa = data.get("mfa_settings") or {}
        if "mfa_enabled" in mfa:
            user.mfa_enabled = mfa["mfa_enabled"]
            update_fields.append("mfa_enabled")
        if "mfa_methods" in mfa:
            # Keep first occurrence order, drop duplicates
            user.mfa_methods = list(dict.fromkeys(mfa["mfa_methods"]))
            update_fields.append("mfa_methods")

        with cls.atomic():
            if update_fields:
                user.save(update_fields=[*update_fields, "updated_at"])
            if "addresses" in data:
                user.addresses.all().delete()
                Address.objects.bulk_create(
                    [Address(user=user, **address) for address in data["addresses"]]
                )

        cls.get_logger().info(f"Account updated for {user.id}: {sorted(data)}")
        return user

    @classmethod
    def change_password(cls, user: User, old_password: str, new_password: str) -> None:
        """
        Raises:
            ValidationError: Old password does not match
        """
        if not user.check_password(old_password):
            raise ValidationError("Old password is incorrect", error_code="WRONG_PASSWORD")

        user.set_password(new_password)
        user.save(update_fields=["password", "updated_at"])
        cls.get_logger().info(f"Password changed for {user.id}")

    @classmethod
    def update_profile(cls, user: User, data: dict[str, Any]) -> Profile:
        """Write the keys present in a validated ProfileUpdateSerializer payload."""
        profile, _ = Profile.objects.get_or_create(user=user)
        fields = [key for key in ("bio", "interests", "profile_picture") if key in data]
        for key in fields:
            setattr(profile, key, data[key])
        if fields:
            profile.save(update_fields=[*fields, "updated_at"])
        return profile

    @classmethod
    def upload_photo(cls, user: User, upload: UploadedFile) -> Profile:
        """
        Store an uploaded image and set it as the profile picture.

        The file is saved through the default storage backend under
        PHOTO_DIRECTORY with a random name; the original extension is kept.
        """
        extension = os.path.splitext(upload.name)[1].lower() or ".jpg"
        path = default_storage.save(
            f"{cls.PHOTO_DIRECTORY}/{user.id}-{uuid.uuid4().hex}{extension}",
            upload,
        )
        profile, _ = Profile.objects.get_or_create(user=user)
        profile.profile_picture = default_storage.url(path)
        profile.save(update_fields=["profile_picture", "updated_at"])

        cls.get_logger().info(f"Profile photo uploaded for {user.id}: {path}")
        return profile

    @classmethod
    def deactivate(cls, user: User) -> None:
        user.is_active = False
        user.save(update_fields=["is_active", "updated_at"])
        cls.get_logger().info(f"Account deactivated: {user.id}")

    @classmethod
    def clear_expired_codes(cls) -> int:
        """
        Blank out one-time codes whose expiry has passed.

        Returns:
            Number of users updated
        """
        cleared = User.objects.filter(
            otp_expires_at__lte=timezone.now(),
        ).update(otp_code="", otp_expires_at=None)
        if cleared:
            cls.get_logger().info(f"Cleared {cleared} expired one-time codes")
        return cleared
