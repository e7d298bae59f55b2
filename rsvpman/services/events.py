"""Event service.

Events carry a single timezone-aware start/end timestamp; callers parse
their own wire formats before calling in.
"""

from datetime import datetime

from django.db import transaction
from django.utils import timezone

from rsvpman.exceptions import RsvpmanError
from rsvpman.models import Event
from rsvpman.services import users
from rsvpman.utils import get_or_none

UPDATABLE_FIELDS = {
    "title",
    "start_at",
    "end_at",
    "location",
    "address",
    "invite_message",
    "image",
}


def get(event_id) -> Event | None:
    return get_or_none(Event.objects.select_related("host"), pk=event_id)


def require(event_id) -> Event:
    """Get event or raise EVENT_NOT_FOUND."""
    event = get(event_id)
    if event is None:
        raise RsvpmanError("EVENT_NOT_FOUND", event_id=str(event_id))
    return event


def _check_schedule(start_at: datetime, end_at: datetime) -> None:
    if timezone.is_naive(start_at) or timezone.is_naive(end_at):
        raise RsvpmanError(
            "INVALID_SCHEDULE", "Event times must be timezone-aware"
        )
    if end_at <= start_at:
        raise RsvpmanError("INVALID_SCHEDULE")


def create_event(
    host_id,
    title: str,
    start_at: datetime,
    end_at: datetime,
    **fields,
) -> Event:
    """Create an event hosted by host_id."""
    host = users.require(host_id)
    _check_schedule(start_at, end_at)
    extra = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
    return Event.objects.create(
        host=host,
        title=title,
        start_at=start_at,
        end_at=end_at,
        **extra,
    )


def update_event(event_id, **fields) -> Event:
    """Update whitelisted event fields; the schedule is validated as a whole."""
    event = require(event_id)
    for key, value in fields.items():
        if key in UPDATABLE_FIELDS and value is not None:
            setattr(event, key, value)
    _check_schedule(event.start_at, event.end_at)
    event.save()
    return event


def add_cohost(event_id, user_id) -> Event:
    with transaction.atomic():
        event = require(event_id)
        event.co_hosts.add(users.require(user_id))
    return event


def remove_cohost(event_id, user_id) -> Event:
    with transaction.atomic():
        event = require(event_id)
        event.co_hosts.remove(users.require(user_id))
    return event


def is_host_or_cohost(user_id, event_id) -> bool:
    """Boolean access check for host-facing reads (False when event missing)."""
    event = get(event_id)
    if event is None or users.get(user_id) is None:
        return False
    return event.is_host_or_cohost(user_id)
