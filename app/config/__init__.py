# =============================================================================
# Chat Backend Configuration Package
# =============================================================================
# Settings, URLs, ASGI/WSGI applications and Celery configuration.
#
# The Celery app is imported here so shared_task picks it up when Django starts.
# =============================================================================

from config.celery import app as celery_app

__all__ = ("celery_app",)
