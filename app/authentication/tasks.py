"""
Celery tasks for authentication.

This module defines periodic housekeeping on user records:
- Clearing expired one-time codes

The schedule is declared in settings.CELERY_BEAT_SCHEDULE.

Usage:
    from authentication.tasks import clear_expired_one_time_codes
    clear_expired_one_time_codes.delay()
"""

import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def clear_expired_one_time_codes(self) -> int:
    """
    Blank out one-time codes whose expiry has passed.

    Returns:
        Number of users whose code was cleared
    """
    from authentication.services import UserService

    cleared = UserService.clear_expired_codes()
    logger.debug(f"clear_expired_one_time_codes finished: {cleared} cleared")
    return cleared
