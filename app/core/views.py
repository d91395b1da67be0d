"""
Core views providing infrastructure endpoints.

These views are not part of the chat domain but are needed to run it,
such as the health check polled by Docker and load balancers.
"""

import logging

from channels.layers import get_channel_layer
from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def health_check(request):
    """
    Health check endpoint for monitoring and orchestration.

    Returns:
        JsonResponse with status and component health:
        - status: "healthy" or "unhealthy"
        - database: "connected" or "disconnected"
        - cache: "connected" or "disconnected"
        - channel_layer: the configured backend class name, or "missing"

    HTTP Status Codes:
        200: Database reachable
        503: Database unreachable

    Only the database decides the status code. A cache outage degrades
    throttling, and a missing channel layer stops realtime fan-out, but the
    REST API keeps working.
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "cache": "unknown",
        "channel_layer": "missing",
    }
    is_healthy = True

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except Exception:
        logger.exception("Health check: database unreachable")
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"
        is_healthy = False

    try:
        cache.set("health_check", "ok", timeout=1)
        if cache.get("health_check") == "ok":
            health_status["cache"] = "connected"
        else:
            health_status["cache"] = "disconnected"
    except Exception:
        logger.warning("Health check: cache unreachable", exc_info=True)
        health_status["cache"] = "disconnected"

    layer = get_channel_layer()
    if layer is not None:
        health_status["channel_layer"] = layer.__class__.__name__

    return JsonResponse(health_status, status=200 if is_healthy else 503)
