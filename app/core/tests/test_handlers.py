"""
Tests for the centralized REST error responder.

Verifies:
- Operational errors (core.exceptions, DRF APIException) are returned verbatim
- Validation errors are flattened into message + errors
- Unexpected errors are hidden outside DEBUG and detailed inside it
"""

from django.http import Http404
from rest_framework import exceptions

from core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from core.handlers import GENERIC_ERROR_MESSAGE, api_exception_handler, flatten_errors


def handle(exc):
    return api_exception_handler(exc, {"view": None})


class TestApplicationErrors:
    """core.exceptions are rendered with their own status and message."""

    def test_not_found(self):
        response = handle(NotFoundError("Room not found"))

        assert response.status_code == 404
        assert response.data == {"status": "fail", "message": "Room not found"}

    def test_permission_denied(self):
        response = handle(PermissionDeniedError("You are not a participant in this room"))

        assert response.status_code == 403
        assert response.data["status"] == "fail"

    def test_conflict_maps_to_400(self):
        response = handle(ConflictError("You are already in this room"))

        assert response.status_code == 400


class TestDRFExceptions:
    """DRF's own exceptions share the body shape."""

    def test_validation_error_lists_every_message(self):
        exc = exceptions.ValidationError(
            {"name": ["This field is required."], "email": ["Enter a valid email address."]}
        )

        response = handle(exc)

        assert response.status_code == 400
        assert response.data["message"] == "name: This field is required."
        assert response.data["errors"] == [
            "name: This field is required.",
            "email: Enter a valid email address.",
        ]

    def test_django_404_becomes_not_found(self):
        response = handle(Http404())

        assert response.status_code == 404
        assert response.data["status"] == "fail"

    def test_throttled_sets_retry_after(self):
        response = handle(exceptions.Throttled(wait=30))

        assert response.status_code == 429
        assert response["Retry-After"] == "30"


class TestUnexpectedErrors:
    """Anything else is a 500."""

    def test_message_hidden_outside_debug(self, settings):
        settings.DEBUG = False

        response = handle(RuntimeError("database password is hunter2"))

        assert response.status_code == 500
        assert response.data == {"status": "error", "message": GENERIC_ERROR_MESSAGE}

    def test_message_and_stack_shown_in_debug(self, settings):
        settings.DEBUG = True

        response = handle(RuntimeError("boom"))

        assert response.status_code == 500
        assert response.data["message"] == "boom"
        assert response.data["stack"]


class TestFlattenErrors:
    """Tests for flatten_errors()."""

    def test_non_field_errors_are_unprefixed(self):
        detail = {"non_field_errors": ["Please provide email and password"]}

        assert flatten_errors(detail) == ["Please provide email and password"]

    def test_nested_errors_use_dotted_path(self):
        detail = {"mfa_settings": {"methods": ['"x" is not a valid choice.']}}

        assert flatten_errors(detail) == ['mfa_settings.methods: "x" is not a valid choice.']
