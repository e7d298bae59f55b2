"""
Public web invite endpoints.

The anonymous RSVP channel: anyone holding a group invite link can read the
invite and answer it. An optional "Authorization: Bearer <token>" header,
resolved through the configured AUTH_VERIFIER, switches a request to the
authenticated (app) flow. The "?t=<token>" of a generated InviteLink is
optional, but a revoked token is refused.

    GET  invite/<group_id>/                 invite details
    POST invite/<group_id>/rsvp/            submit RSVP
    GET  invite/<group_id>/status/<phone>/  own RSVP (authenticated only)
"""

import json
import logging

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from rsvpman.backends import get_auth_verifier
from rsvpman.exceptions import ErrorKind, RsvpmanError
from rsvpman.models import Rsvp
from rsvpman.services import guests, invites, users
from rsvpman.services.guests import RsvpPayload
from rsvpman.utils import normalize_phone

logger = logging.getLogger(__name__)

# Answers a guest can give through the web form
WEB_RSVP_CHOICES = (Rsvp.ACCEPTED, Rsvp.DECLINED, Rsvp.MAYBE)

STATUS_ONLY_IN_APP = (
    "RSVP status can be viewed and managed in the app. "
    "Please download the app to continue."
)

HTTP_STATUS = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.EXPIRED: 400,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}


def error_response(error: RsvpmanError) -> JsonResponse:
    return JsonResponse(
        {"error": error.as_dict(), "message": error.message},
        status=HTTP_STATUS.get(error.kind, 500),
    )


def serialize_event(event) -> dict:
    return {
        "id": str(event.pk),
        "title": event.title,
        "location": event.location,
        "address": event.address,
        "start_at": event.start_at.isoformat(),
        "end_at": event.end_at.isoformat(),
        "image": event.image,
        "invite_message": event.invite_message,
    }


def serialize_group(group) -> dict:
    return {"id": str(group.pk), "name": group.name}


def serialize_record(record) -> dict:
    return {
        "id": str(record.pk),
        "event_id": str(record.event_id),
        "group_id": str(record.group_id) if record.group_id else None,
        "is_linked": record.is_linked,
        "name": record.display_name,
        "rsvp": record.rsvp,
        "count": record.count,
        **record.preferences(),
    }


class InviteView(View):
    """Base view: optional bearer auth + RsvpmanError -> JSON error."""

    def dispatch(self, request, *args, **kwargs):
        try:
            request.rsvpman_user_id = self.authenticate(request)
            self.check_link_token(request, kwargs.get("group_id"))
            return super().dispatch(request, *args, **kwargs)
        except RsvpmanError as exc:
            return error_response(exc)

    def check_link_token(self, request, group_id):
        """A link token (?t=) must belong to an active link of the group."""
        token = request.GET.get("t")
        if token:
            invites.require_active_link(group_id, token)

    def authenticate(self, request):
        """User id from the bearer token, None when no token was sent."""
        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            return None
        user_id = get_auth_verifier().verify(header[len("Bearer "):].strip())
        if user_id is None:
            logger.warning("Invite request with invalid bearer token")
            raise RsvpmanError("INVALID_TOKEN")
        return user_id


class InviteDetailView(InviteView):
    def get(self, request, group_id):
        user_id = request.rsvpman_user_id
        details = invites.group_invite_details(group_id, user_id=user_id)
        return JsonResponse(
            {
                "group": serialize_group(details.group),
                "event": serialize_event(details.event),
                "user_context": details.user_context,
                "is_authenticated": user_id is not None,
            }
        )


@method_decorator(csrf_exempt, name="dispatch")
class InviteRsvpView(InviteView):
    def post(self, request, group_id):
        try:
            data = json.loads(request.body or b"{}")
        except (json.JSONDecodeError, ValueError):
            return JsonResponse({"message": "Invalid JSON"}, status=400)
        if not isinstance(data, dict):
            return JsonResponse({"message": "Invalid JSON"}, status=400)

        payload = RsvpPayload.from_dict(data)
        if payload.rsvp not in WEB_RSVP_CHOICES:
            raise RsvpmanError("INVALID_RSVP", allowed=list(WEB_RSVP_CHOICES))

        user_id = request.rsvpman_user_id
        submission = guests.submit_rsvp(
            group_id,
            payload,
            authenticated_user_id=user_id,
            event_id=data.get("event_id"),
        )
        return JsonResponse(
            {
                "message": submission.message,
                "guest": serialize_record(submission.record),
                "already_submitted": submission.already_submitted,
                "is_authenticated": user_id is not None,
                "was_authenticated": submission.was_authenticated,
                "show_app_download": submission.show_app_download,
            },
            status=201 if submission.created else 200,
        )


class InviteStatusView(InviteView):
    def get(self, request, group_id, phone):
        user_id = request.rsvpman_user_id
        user = users.get(user_id) if user_id else None
        # Phone alone is not proof of identity: only its owner may look
        if user is None or user.phone != normalize_phone(phone):
            return JsonResponse({"message": STATUS_ONLY_IN_APP}, status=403)

        guests.require_group(group_id)
        record = guests.group_rsvp_status(group_id, phone)
        if record is None:
            raise RsvpmanError(
                "GUEST_NOT_FOUND", "No RSVP found for this phone number in this group"
            )
        return JsonResponse({"guest": serialize_record(record)})
