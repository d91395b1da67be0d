"""
Django admin configuration for authentication models.

Registers User (with profile and addresses inline) with the admin site.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import Address, Profile, User


class ProfileInline(admin.StackedInline):
    model = Profile
    can_delete = False
    fields = ("bio", "interests", "profile_picture")


class AddressInline(admin.TabularInline):
    model = Address
    extra = 0
    fields = ("street", "city", "country")


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin configuration for User model.

    Customized for email-based authentication. Deactivate users by
    unticking is_active rather than deleting them.
    """

    list_display = (
        "email",
        "name",
        "email_verified",
        "is_active",
        "is_staff",
        "date_joined",
    )
    list_filter = (
        "is_active",
        "is_staff",
        "is_superuser",
        "email_verified",
        "mfa_enabled",
    )
    search_fields = ("email", "name")
    ordering = ("-date_joined",)
    inlines = (ProfileInline, AddressInline)

    fieldsets = (
        (None, {"fields": ("email", "name", "password")}),
        (
            "Status",
            {"fields": ("email_verified", "is_active", "is_staff", "is_superuser")},
        ),
        (
            "Security",
            {"fields": ("mfa_enabled", "mfa_methods", "otp_code", "otp_expires_at")},
        ),
        ("Permissions", {"fields": ("groups", "user_permissions")}),
        ("Important dates", {"fields": ("date_joined", "last_login")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "name", "password1", "password2"),
            },
        ),
    )

    readonly_fields = ("date_joined", "last_login")
