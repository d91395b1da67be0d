"""
Centralized REST error responder.

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"], so every failure raised
by a view, serializer, permission or authentication class ends up here and
is rendered with one body shape:

    {"status": "fail" | "error", "message": str, "errors": [...], "stack": [...]}

- status is "fail" for 4xx and "error" for 5xx
- errors is present only for validation failures
- stack is present only when DEBUG is on

Operational failures (core.exceptions.BaseApplicationError and DRF's
APIException family) are returned verbatim. Everything else is an
unexpected fault: it is logged with its traceback and, outside DEBUG,
answered with a generic 500 so internal details never reach clients.
"""

from __future__ import annotations

import logging
import traceback
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went very wrong!"


def status_label(status_code: int) -> str:
    """Return "fail" for client errors and "error" for everything else."""
    return "fail" if 400 <= status_code < 500 else "error"


def flatten_errors(detail: Any, field: str | None = None) -> list[str]:
    """
    Flatten DRF's nested error detail into a list of readable strings.

    Field errors are prefixed with the field name; non-field errors are
    returned as-is.

    Example:
        flatten_errors({"email": ["Enter a valid email address."]})
        # ["email: Enter a valid email address."]
    """
    if isinstance(detail, dict):
        non_field_key = settings.REST_FRAMEWORK.get(
            "NON_FIELD_ERRORS_KEY", "non_field_errors"
        )
        messages: list[str] = []
        for key, value in detail.items():
            if key == non_field_key:
                name = field
            else:
                name = f"{field}.{key}" if field else str(key)
            messages.extend(flatten_errors(value, name))
        return messages
    if isinstance(detail, (list, tuple)):
        messages = []
        for item in detail:
            messages.extend(flatten_errors(item, field))
        return messages
    text = str(detail)
    return [f"{field}: {text}" if field else text]


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response:
    """
    Convert any exception raised while handling a request into a response.

    Args:
        exc: The exception raised by the view
        context: DRF handler context (view, request, args, kwargs)

    Returns:
        Response carrying the unified error body
    """
    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()

    if isinstance(exc, BaseApplicationError):
        return Response(exc.to_dict(), status=exc.status_code)

    if isinstance(exc, exceptions.APIException):
        headers = {}
        if getattr(exc, "auth_header", None):
            headers["WWW-Authenticate"] = exc.auth_header
        if getattr(exc, "wait", None):
            headers["Retry-After"] = "%d" % exc.wait

        body: dict[str, Any] = {"status": status_label(exc.status_code)}
        if isinstance(exc, exceptions.ValidationError):
            errors = flatten_errors(exc.detail)
            body["message"] = errors[0] if errors else "Invalid input."
            body["errors"] = errors
        else:
            body["message"] = str(exc.detail)
        return Response(body, status=exc.status_code, headers=headers)

    view = context.get("view")
    logger.error(
        "Unhandled error in %s: %s",
        view.__class__.__name__ if view is not None else "unknown view",
        exc,
        exc_info=exc,
    )

    body = {"status": "error", "message": GENERIC_ERROR_MESSAGE}
    if settings.DEBUG:
        body["message"] = str(exc) or exc.__class__.__name__
        body["stack"] = traceback.format_exception(exc)
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
