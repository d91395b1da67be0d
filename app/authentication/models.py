"""
Authentication models.

This module defines the identity store:
- User: Custom user model with email-based authentication
- Profile: Public profile data (OneToOne with User)
- Address: Postal addresses attached to a user

Friendships live in chat.models because each one carries the direct-message
rooms shared by the two users.

Related files:
    - managers.py: Custom user manager for email-based creation
    - services.py: AuthService and UserService business logic
    - signals.py: Auto-create profile on user creation
    - tokens.py: Bearer token issuance and verification

Security:
    - Passwords hashed with the first entry of settings.PASSWORD_HASHERS
    - The password hash is never part of any serializer
    - Deactivation flips is_active; rows are never physically removed
"""

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from django.utils import timezone

from authentication.managers import UserManager
from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class User(UUIDPrimaryKeyMixin, AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        id: UUID primary key, embedded in bearer tokens
        name: Display name shown in rooms and messages
        email: Primary identifier, unique, used for login
        email_verified: Whether the user's email has been confirmed
        is_active: False once the account is deactivated
        is_staff: Whether the user can access Django admin
        otp_code: Current one-time code, blank when none is pending
        otp_expires_at: When otp_code stops being valid
        mfa_enabled: Whether multi-factor authentication is on
        mfa_methods: Subset of MFAMethod values
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(
            email="a@x.com",
            password="123456",
            name="A",
        )
    """

    class MFAMethod(models.TextChoices):
        EMAIL = "email", "Email"
        SMS = "sms", "SMS"
        AUTHENTICATOR_APP = "authenticator_app", "Authenticator app"

    name = models.CharField(
        max_length=150,
        help_text="User's display name",
    )
    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )
    email_verified = models.BooleanField(
        default=False,
        help_text="Whether the user's email has been confirmed",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    otp_code = models.CharField(
        max_length=10,
        blank=True,
        default="",
        help_text="Pending one-time code",
    )
    otp_expires_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the pending one-time code expires",
    )

    mfa_enabled = models.BooleanField(
        default=False,
        help_text="Whether multi-factor authentication is enabled",
    )
    mfa_methods = models.JSONField(
        default=list,
        blank=True,
        help_text="Enabled multi-factor methods (email, sms, authenticator_app)",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.name or self.email

    def get_short_name(self):
        return self.name or self.email.split("@")[0]

    @property
    def has_pending_otp(self):
        """True while a one-time code is set and not yet expired."""
        return bool(
            self.otp_code
            and self.otp_expires_at
            and self.otp_expires_at > timezone.now()
        )


class Profile(BaseModel):
    """
    Public profile data.

    Fields:
        user: OneToOne link to User (also serves as primary key)
        bio: Free text, at most 500 characters
        interests: Ordered list of interest strings
        profile_picture: URL of the profile picture (uploaded or external)

    Note:
        Profile is automatically created via signals when a User is created.
    """

    BIO_MAX_LENGTH = 500

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
        primary_key=True,
        help_text="User this profile belongs to",
    )
    bio = models.CharField(
        max_length=BIO_MAX_LENGTH,
        blank=True,
        default="",
        help_text="Short biography",
    )
    interests = models.JSONField(
        default=list,
        blank=True,
        help_text="Ordered list of interests",
    )
    profile_picture = models.CharField(
        max_length=500,
        blank=True,
        default="",
        help_text="URL of the profile picture",
    )

    class Meta:
        verbose_name = "profile"
        verbose_name_plural = "profiles"

    def __str__(self):
        return f"Profile for {self.user.email}"


class Address(UUIDPrimaryKeyMixin, BaseModel):
    """
    A postal address belonging to a user.

    A user's addresses are replaced as a whole list on update, so the
    model has no ordering field of its own; creation order is used.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="addresses",
    )
    street = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=120, blank=True, default="")
    country = models.CharField(max_length=120, blank=True, default="")

    class Meta:
        verbose_name = "address"
        verbose_name_plural = "addresses"
        ordering = ["created_at"]

    def __str__(self):
        return ", ".join(part for part in (self.street, self.city, self.country) if part)
