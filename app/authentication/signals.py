"""
Django signals for authentication.

This module defines signal handlers for:
- Auto-creating Profile when User is created
- Logging account deactivation

Usage:
    Signals are automatically connected when the app is ready.
    See apps.py for the import that triggers connection.
"""

import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_user_profile(sender, instance, created, **kwargs):
    """
    Create a Profile for newly created users.

    Profile starts with an empty bio, no interests and no picture.
    """
    if created:
        from authentication.models import Profile

        Profile.objects.get_or_create(user=instance)
        logger.debug(f"Profile created for user: {instance.email}")


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def log_deactivation(sender, instance, created, update_fields, **kwargs):
    """Log when a user's account is deactivated."""
    if not created and update_fields and "is_active" in update_fields:
        if not instance.is_active:
            logger.info(f"User deactivated: {instance.id}")
