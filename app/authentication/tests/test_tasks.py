"""Tests for authentication Celery tasks."""

from datetime import timedelta

from django.utils import timezone

from authentication.tasks import clear_expired_one_time_codes
from authentication.tests.factories import UserFactory


class TestClearExpiredOneTimeCodes:
    """Tests for the clear_expired_one_time_codes periodic task."""

    def test_task_clears_expired_codes(self, db):
        user = UserFactory(otp_code="111111", otp_expires_at=timezone.now() - timedelta(hours=1))

        result = clear_expired_one_time_codes.apply().get()

        user.refresh_from_db()
        assert result == 1
        assert user.otp_code == ""

    def test_task_is_scheduled(self, settings):
        tasks = {entry["task"] for entry in settings.CELERY_BEAT_SCHEDULE.values()}

        assert "authentication.tasks.clear_expired_one_time_codes" in tasks
