"""
Serializers for authentication models.

This module provides DRF serializers for:
- User representations (summary, public, full "me")
- Signup and login payloads
- Account, password, profile and photo updates

Related files:
    - models.py: User, Profile and Address models
    - views.py: Views that use these serializers
    - services.py: AuthService and UserService

Security:
    - The password hash is never serialized
    - Password fields are write-only
"""

from django.conf import settings
from rest_framework import serializers

from authentication.models import Address, Profile, User


# =============================================================================
# Read Serializers
# =============================================================================


class UserSummarySerializer(serializers.ModelSerializer):
    """
    Minimal user representation.

    Used in auth responses and wherever a user is embedded in a room or
    message (creator, participants, sender).
    """

    class Meta:
        model = User
        fields = ["id", "name", "email"]
        read_only_fields = fields


class ProfileSerializer(serializers.ModelSerializer):
    """Profile fields as stored."""

    class Meta:
        model = Profile
        fields = ["bio", "interests", "profile_picture"]
        read_only_fields = fields


class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = ["street", "city", "country"]


class MFASettingsSerializer(serializers.Serializer):
    """Multi-factor settings, stored as two columns on User."""

    enabled = serializers.BooleanField(source="mfa_enabled", required=False)
    methods = serializers.ListField(
        child=serializers.ChoiceField(choices=User.MFAMethod.choices),
        source="mfa_methods",
        required=False,
    )


class FriendSerializer(serializers.Serializer):
    """A friend with the direct-message rooms shared with them."""

    friend = UserSummarySerializer(read_only=True)
    dm = serializers.PrimaryKeyRelatedField(
        source="dm_rooms", many=True, read_only=True
    )


class PublicUserSerializer(serializers.ModelSerializer):
    """
    What any authenticated user can see about another user.

    Used by GET /users/{id} and the user search endpoint.
    """

    profile = ProfileSerializer(read_only=True)

    class Meta:
        model = User
        fields = ["id", "name", "email", "profile"]
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    """
    Full representation of the current user.

    Used by GET /auth/me and GET|PATCH /users/me.
    """

    active = serializers.BooleanField(source="is_active", read_only=True)
    profile = ProfileSerializer(read_only=True)
    addresses = AddressSerializer(many=True, read_only=True)
    friends = FriendSerializer(source="friendships", many=True, read_only=True)
    mfa_settings = MFASettingsSerializer(source="*", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "email_verified",
            "active",
            "profile",
            "addresses",
            "friends",
            "mfa_settings",
            "date_joined",
        ]
        read_only_fields = fields


# =============================================================================
# Auth Payloads
# =============================================================================


class SignupSerializer(serializers.Serializer):
    """
    Validate a signup payload.

    Fields are declared optional so a missing field produces the single
    "Please provide name, email, and password" message instead of one
    error per field.
    """

    name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    email = serializers.EmailField(required=False, allow_blank=True)
    password = serializers.CharField(
        required=False,
        allow_blank=True,
        write_only=True,
        trim_whitespace=False,
    )

    def validate(self, attrs):
        if not all(attrs.get(key) for key in ("name", "email", "password")):
            raise serializers.ValidationError("Please provide name, email, and password")
        if len(attrs["password"]) < settings.PASSWORD_MIN_LENGTH:
            raise serializers.ValidationError(
                f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
            )
        return attrs


class LoginSerializer(serializers.Serializer):
    """Validate a login payload."""

    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(
        required=False,
        allow_blank=True,
        write_only=True,
        trim_whitespace=False,
    )

    def validate(self, attrs):
        if not attrs.get("email") or not attrs.get("password"):
            raise serializers.ValidationError("Please provide email and password")
        return attrs


class AuthResponseSerializer(serializers.Serializer):
    """Response body of signup and login (documentation only)."""

    status = serializers.CharField()
    token = serializers.CharField()
    user = UserSummarySerializer()


# =============================================================================
# Update Payloads
# =============================================================================


class UserUpdateSerializer(serializers.Serializer):
    """
    Partial update of the current user's account fields.

    addresses replaces the whole list when present.
    """

    name = serializers.CharField(required=False, min_length=3, max_length=50)
    email = serializers.EmailField(required=False)
    addresses = AddressSerializer(many=True, required=False)
    mfa_settings = MFASettingsSerializer(required=False)


class PasswordUpdateSerializer(serializers.Serializer):
    old_password = serializers.CharField(write_only=True, trim_whitespace=False)
    new_password = serializers.CharField(
        write_only=True,
        trim_whitespace=False,
        min_length=settings.PASSWORD_MIN_LENGTH,
    )


class ProfileUpdateSerializer(serializers.Serializer):
    """
    Partial update of the current user's profile.

    Only the keys present in the request are written.
    """

    bio = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=Profile.BIO_MAX_LENGTH,
    )
    interests = serializers.ListField(
        child=serializers.CharField(max_length=50),
        required=False,
    )
    profile_picture = serializers.URLField(required=False, allow_blank=True)


class PhotoUploadSerializer(serializers.Serializer):
    """
    Multipart upload of a new profile picture.

    ImageField runs the file through Pillow, so only real images pass.
    """

    profile_picture = serializers.ImageField()

    def validate_profile_picture(self, value):
        if value.size > settings.PROFILE_PHOTO_MAX_BYTES:
            limit_mb = settings.PROFILE_PHOTO_MAX_BYTES // (1024 * 1024)
            raise serializers.ValidationError(f"File too large, limit is {limit_mb}MB")
        return value
