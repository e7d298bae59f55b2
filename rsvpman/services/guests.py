"""Guest record service - invitations and RSVP submission.

Two submission channels share one entry point, submit_rsvp():

- App (authenticated): the caller passes a verified user id; the linked
  record for (event, user) is created or updated in place.
- Web (anonymous): identified only by name/phone/email. Single-shot: a
  second submission for the same (event, group, phone) is not applied,
  edits go through the app.

All write paths run inside transaction.atomic(); the unique constraints on
GuestRecord decide races between concurrent requests.
"""

import logging
from dataclasses import dataclass, fields

from django.db import IntegrityError, transaction
from django.utils import timezone

from rsvpman.conf import rsvpman_settings
from rsvpman.exceptions import RsvpmanError
from rsvpman.gates import Gates
from rsvpman.identity import Linked, Unlinked
from rsvpman.models import (
    EventGroup,
    GuestGroup,
    GuestRecord,
    PREFERENCE_FIELDS,
    Rsvp,
    User,
)
from rsvpman.services import events, users
from rsvpman.signals import rsvp_submitted
from rsvpman.utils import get_or_none, normalize_phone

logger = logging.getLogger(__name__)


ALREADY_SUBMITTED_MESSAGE = (
    "You have already submitted your RSVP. Download our app to view or update it."
)

WEB_MESSAGES = {
    Rsvp.ACCEPTED: (
        "Great! Your RSVP has been confirmed. Download our app to manage all "
        "your event RSVPs and get updates!"
    ),
    Rsvp.DECLINED: (
        "Thanks for letting us know. Download our app to stay updated on future events!"
    ),
    Rsvp.MAYBE: (
        "Thanks for your response! Download our app to update your RSVP anytime "
        "and manage all your events!"
    ),
    Rsvp.NO_RESPONSE: (
        "Thanks! Your response has been recorded. Download our app to manage all "
        "your event RSVPs and get updates!"
    ),
    Rsvp.FAILED_DELIVERY: (
        "We received your submission, but there was an issue delivering the "
        "response. Download our app for updates and to manage your RSVP."
    ),
}


TEXT_FIELDS = ("rsvp", "name", "phone", "email", *PREFERENCE_FIELDS)


@dataclass
class RsvpPayload:
    """RSVP form data, as submitted by either channel."""

    rsvp: str
    name: str = ""
    phone: str = ""
    email: str = ""
    food: str = ""
    alcohol: str = ""
    accommodation: str = ""
    count: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "RsvpPayload":
        """
        Build from a request body; accepts phone_no as an alias of phone.

        Raises:
            RsvpmanError(INVALID_FIELD): a text field holds a non-string value
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known and v is not None}
        if "phone" not in values and data.get("phone_no") is not None:
            values["phone"] = data["phone_no"]
        for name in TEXT_FIELDS:
            if name in values and not isinstance(values[name], str):
                raise RsvpmanError("INVALID_FIELD", f"{name} must be a string", field=name)
        values.setdefault("rsvp", "")
        return cls(**values)

    def preferences(self) -> dict:
        """Only the preference fields that were actually supplied."""
        return {
            field: getattr(self, field)
            for field in PREFERENCE_FIELDS
            if getattr(self, field)
        }


@dataclass
class RsvpSubmission:
    """Outcome of submit_rsvp()."""

    record: GuestRecord
    message: str
    is_web_submission: bool
    was_authenticated: bool
    created: bool = False
    already_submitted: bool = False
    user: User | None = None

    @property
    def show_app_download(self) -> bool:
        return self.is_web_submission


# ======================================================================
# Lookups
# ======================================================================


def require_group(group_id) -> GuestGroup:
    group = get_or_none(GuestGroup.objects, pk=group_id)
    if group is None:
        raise RsvpmanError("GROUP_NOT_FOUND", group_id=str(group_id))
    return group


def resolve_event(group_id, event_id=None):
    """
    Resolve the (group, event) pair an invite link points at.

    With event_id, the event must be associated with the group. Without it,
    the group's next upcoming event is used, falling back to its earliest
    one (so a link to a past event still reports RSVP_WINDOW_CLOSED).

    Returns:
        (GuestGroup, Event)
    """
    group = require_group(group_id)
    links = EventGroup.objects.filter(group=group).select_related("event")

    if event_id is not None:
        link = get_or_none(links, event_id=event_id)
        if link is None:
            events.require(event_id)
            raise RsvpmanError(
                "GROUP_NOT_ATTACHED",
                group_id=str(group.pk),
                event_id=str(event_id),
            )
        return group, link.event

    link = (
        links.filter(event__start_at__gt=timezone.now()).order_by("event__start_at").first()
        or links.order_by("event__start_at").first()
    )
    if link is None:
        raise RsvpmanError(
            "EVENT_NOT_FOUND",
            "Group is not associated with any event",
            group_id=str(group.pk),
        )
    return group, link.event


def _validate_submission(event, payload: RsvpPayload) -> None:
    """Checks that must pass before any mutation."""
    Gates.rsvp_window(event)
    Gates.rsvp_value(payload.rsvp)
    if payload.count is not None:
        Gates.party_size(payload.count)


def _apply_response(record: GuestRecord, payload: RsvpPayload) -> None:
    record.rsvp = payload.rsvp
    for field, value in payload.preferences().items():
        setattr(record, field, value)
    if payload.count is not None:
        record.count = payload.count
    elif record._state.adding:
        record.count = rsvpman_settings.DEFAULT_GUEST_COUNT


# ======================================================================
# Group attachment
# ======================================================================


def create_linked_records(event, group, user_ids) -> list[GuestRecord]:
    """
    Create no_response records for user_ids lacking one for event.

    Users that already have a record for the event are skipped, including
    records created concurrently (skip on conflict).
    """
    user_ids = list(user_ids)
    existing = set(
        GuestRecord.objects.filter(event=event, user_id__in=user_ids).values_list(
            "user_id", flat=True
        )
    )
    missing = [uid for uid in user_ids if uid not in existing]
    if not missing:
        return []

    records = []
    for uid in missing:
        record = GuestRecord(event=event, group=group, rsvp=Rsvp.NO_RESPONSE, count=1)
        record.set_identity(Linked(uid))
        records.append(record)
    GuestRecord.objects.bulk_create(records, ignore_conflicts=True)
    return list(
        GuestRecord.objects.filter(event=event, user_id__in=missing).select_related("user")
    )


def attach_group_to_event(event_id, group_id) -> list[GuestRecord]:
    """
    Associate group with event and invite every current member.

    Idempotent: re-attaching creates records only for members added since.

    Returns:
        Newly created GuestRecords
    """
    event = events.require(event_id)
    group = require_group(group_id)

    with transaction.atomic():
        EventGroup.objects.get_or_create(event=event, group=group)
        member_ids = group.memberships.values_list("user_id", flat=True)
        created = create_linked_records(event, group, member_ids)

    logger.info(
        "Attached group %s to event %s (%d new guests)", group.pk, event.pk, len(created)
    )
    return created


# ======================================================================
# RSVP submission
# ======================================================================


def submit_rsvp(
    group_id,
    payload: RsvpPayload,
    authenticated_user_id=None,
    event_id=None,
) -> RsvpSubmission:
    """
    Submit an RSVP through a group invite.

    Args:
        group_id: Group the invite link belongs to
        payload: RSVP form data
        authenticated_user_id: Verified user id (app channel), None for web
        event_id: Event to answer for (defaults to the group's next event)

    Raises:
        RsvpmanError: NOT_FOUND, RSVP_WINDOW_CLOSED, INVALID_RSVP, ...
    """
    group, event = resolve_event(group_id, event_id)

    if authenticated_user_id:
        user = users.require(authenticated_user_id)
        return submit_authenticated_rsvp(user, event, group, payload)
    return submit_anonymous_rsvp(group, event, payload)


def submit_authenticated_rsvp(user: User, event, group, payload: RsvpPayload) -> RsvpSubmission:
    """
    App channel: create or update the linked record for (event, user).

    An existing record is re-tagged to the group the submission came
    through. Name/email on the submission refresh the User.
    """
    _validate_submission(event, payload)

    try:
        with transaction.atomic():
            users.update_contact(user, payload.name, payload.email)

            record = (
                GuestRecord.objects.select_for_update()
                .filter(event=event, user=user)
                .first()
            )
            created = record is None
            if created:
                record = GuestRecord(event=event)
                record.set_identity(Linked(user.pk))
            record.group = group
            _apply_response(record, payload)
            record.save()
    except IntegrityError as exc:
        logger.warning(
            "RSVP conflict for user %s on event %s: %s", user.pk, event.pk, exc
        )
        raise RsvpmanError("CONFLICT", event_id=str(event.pk)) from exc

    rsvp_submitted.send(
        sender=GuestRecord, record=record, is_web_submission=False, created=created
    )
    return RsvpSubmission(
        record=record,
        message="RSVP submitted successfully" if created else "RSVP updated successfully",
        is_web_submission=False,
        was_authenticated=True,
        created=created,
        user=user,
    )


def _existing_unlinked(event, group, phone: str) -> GuestRecord | None:
    return GuestRecord.objects.for_phone(phone).filter(event=event, group=group).first()


def _already_submitted(record: GuestRecord) -> RsvpSubmission:
    return RsvpSubmission(
        record=record,
        message=ALREADY_SUBMITTED_MESSAGE,
        is_web_submission=True,
        was_authenticated=False,
        already_submitted=True,
    )


def submit_anonymous_rsvp(group, event, payload: RsvpPayload) -> RsvpSubmission:
    """
    Web channel: single-shot unlinked record keyed by (event, group, phone).

    A repeated submission is not applied (already_submitted=True): a phone
    number alone is not proof of identity, so edits require the app.
    """
    _validate_submission(event, payload)
    Gates.anonymous_contact(payload.name, payload.phone)
    identity = Unlinked(name=payload.name, phone=payload.phone, email=payload.email)

    try:
        with transaction.atomic():
            existing = _existing_unlinked(event, group, identity.phone)
            if existing:
                logger.warning(
                    "Duplicate web RSVP for group %s, event %s", group.pk, event.pk
                )
                return _already_submitted(existing)

            record = GuestRecord(event=event, group=group)
            record.set_identity(identity)
            _apply_response(record, payload)
            record.save()
    except IntegrityError:
        # Lost the race against a concurrent submission for the same phone
        existing = _existing_unlinked(event, group, identity.phone)
        if existing is None:
            raise
        return _already_submitted(existing)

    rsvp_submitted.send(
        sender=GuestRecord, record=record, is_web_submission=True, created=True
    )
    return RsvpSubmission(
        record=record,
        message=WEB_MESSAGES[payload.rsvp],
        is_web_submission=True,
        was_authenticated=False,
        created=True,
    )


# ======================================================================
# Read / cancel
# ======================================================================


def rsvp_status(user_id, event_id) -> GuestRecord | None:
    """Linked record of user for event."""
    return get_or_none(GuestRecord.objects.select_related("group"), user_id=user_id, event_id=event_id)


def cancel_rsvp(user_id, event_id) -> GuestRecord:
    """Reset a linked RSVP back to no_response."""
    record = rsvp_status(user_id, event_id)
    if record is None:
        raise RsvpmanError("GUEST_NOT_FOUND", user_id=str(user_id), event_id=str(event_id))
    record.rsvp = Rsvp.NO_RESPONSE
    record.save(update_fields=["rsvp", "updated_at"])
    return record


def user_rsvps(user_id) -> list[GuestRecord]:
    """All events user responded to, soonest first."""
    return list(
        GuestRecord.objects.filter(user_id=user_id)
        .exclude(rsvp=Rsvp.NO_RESPONSE)
        .select_related("event", "group")
        .order_by("event__start_at")
    )


def group_rsvp_status(group_id, phone: str) -> GuestRecord | None:
    """
    RSVP given through group by phone.

    The account holder's linked record wins over a web submission.
    """
    user = users.get_by_phone(phone)
    if user:
        record = (
            GuestRecord.objects.filter(user=user, group_id=group_id)
            .select_related("event")
            .first()
        )
        if record:
            return record
    return (
        GuestRecord.objects.for_phone(normalize_phone(phone))
        .filter(group_id=group_id)
        .select_related("event")
        .first()
    )
