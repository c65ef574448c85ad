"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging
from collections.abc import Mapping

from django.http import HttpResponseRedirect
from django.urls import reverse
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from agenda.conf import agenda_setting
from agenda.domain.errors import DomainError, ErrorCode, EventValidationError, InvalidEventIdError
from agenda.domain.validation import FIELD_NAMES, validate_event_id
from agenda.handlers.csrf import CsrfContext
from agenda.handlers.serializers import EventSerializer
from agenda.services import build_event_service

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.INVALID_DATE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.IMAGE_TOO_LARGE: status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    ErrorCode.UNSUPPORTED_IMAGE_TYPE: status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    ErrorCode.UPLOAD_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.STORAGE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.CSRF_MISSING: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CSRF_INVALID: status.HTTP_403_FORBIDDEN,
}

STATUS_MESSAGES = {
    "updated": "Event updated",
    "deleted": "Event deleted",
}


def error_response(error: DomainError) -> Response:
    """Render a domain error as ``{"ok": false, "error": ...}``."""
    return Response(
        {"ok": False, "error": error.message},
        status=ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
    )


def submitted_fields(request: Request) -> dict[str, str]:
    if not isinstance(request.data, Mapping):
        raise EventValidationError("Invalid form submission")
    return {name: request.data.get(name, "") for name in FIELD_NAMES}


def _rotate_if_enabled(csrf: CsrfContext, body: dict) -> None:
    if agenda_setting("ROTATE_CSRF"):
        body["csrf"] = csrf.rotate()


class CsrfTokenView(APIView):
    """Handler for GET /api/csrf"""

    def get(self, request: Request) -> Response:
        return Response({"ok": True, "csrf": CsrfContext.from_request(request).token()})


class EventListView(APIView):
    """Handler for GET /api/events (upcoming) and POST /api/events (create)"""

    def get(self, request: Request) -> Response:
        try:
            events = build_event_service().list_upcoming()
        except DomainError as error:
            return error_response(error)
        return Response({"ok": True, "events": EventSerializer(events, many=True).data})

    def post(self, request: Request) -> Response:
        csrf = CsrfContext.from_request(request)
        try:
            csrf.verify(request.data.get("csrf"))
            event = build_event_service().create_event(
                submitted_fields(request),
                image=request.FILES.get("image"),
            )
        except DomainError as error:
            logger.warning("Create rejected: %s", error)
            return error_response(error)

        body = {"ok": True, "event": EventSerializer(event).data}
        _rotate_if_enabled(csrf, body)
        return Response(body, status=status.HTTP_201_CREATED)


class EventFeedView(APIView):
    """Handler for GET /events.json, the public feed document"""

    def get(self, request: Request) -> Response:
        try:
            events = build_event_service().list_events()
        except DomainError as error:
            return error_response(error)
        return Response(EventSerializer(events, many=True).data)


class EventManageView(APIView):
    """Handler for GET/POST /admin/manage

    POST takes ``action`` = ``update`` or ``delete`` and redirects back to the
    listing with a ``msg`` status indicator on success.
    """

    def get(self, request: Request) -> Response:
        try:
            events = build_event_service().list_events()
        except DomainError as error:
            return error_response(error)
        return Response(
            {
                "ok": True,
                "events": EventSerializer(events, many=True).data,
                "csrf": CsrfContext.from_request(request).token(),
                "message": STATUS_MESSAGES.get(request.query_params.get("msg", "")),
            }
        )

    def post(self, request: Request):
        csrf = CsrfContext.from_request(request)
        action = request.data.get("action", "")
        event_id = request.data.get("id", "")
        try:
            csrf.verify(request.data.get("csrf"))
            if not validate_event_id(event_id):
                raise InvalidEventIdError()

            service = build_event_service()
            if action == "delete":
                service.delete_event(event_id)
                msg = "deleted"
            elif action == "update":
                service.update_event(
                    event_id,
                    submitted_fields(request),
                    image=request.FILES.get("image"),
                )
                msg = "updated"
            else:
                return Response(
                    {"ok": False, "error": "Unknown action"},
                    status=status.HTTP_400_BAD_REQUEST,
                )
        except DomainError as error:
            logger.warning("Manage %r rejected: %s", action, error)
            return error_response(error)

        if agenda_setting("ROTATE_CSRF"):
            csrf.rotate()
        return HttpResponseRedirect(f"{reverse('event-manage')}?msg={msg}")
