"""Pytest fixtures for RSVPman tests."""

from datetime import timedelta

import pytest
from django.utils import timezone

from rsvpman.models import (
    Event,
    EventGroup,
    GroupMembership,
    GuestGroup,
    GuestRecord,
    Rsvp,
    User,
    VerificationStatus,
)
from rsvpman.identity import Unlinked


@pytest.fixture
def host(db):
    """Verified user hosting the test events."""
    return User.objects.create(
        phone="+15550000001",
        name="Hana Host",
        email="hana@example.com",
        verification_status=VerificationStatus.VERIFIED,
        verified_at=timezone.now(),
    )


@pytest.fixture
def verified_user(db):
    return User.objects.create(
        phone="+15550000002",
        name="Vera Verified",
        verification_status=VerificationStatus.VERIFIED,
        verified_at=timezone.now(),
    )


@pytest.fixture
def placeholder_user(db):
    """Unverified user, as created when a host adds an unknown phone."""
    return User.objects.create(phone="+15550000003")


@pytest.fixture
def event(host):
    """Event one week ahead (RSVP window open)."""
    start = timezone.now() + timedelta(days=7)
    return Event.objects.create(
        host=host,
        title="Summer Party",
        start_at=start,
        end_at=start + timedelta(hours=5),
        location="Rooftop",
    )


@pytest.fixture
def second_event(host):
    start = timezone.now() + timedelta(days=14)
    return Event.objects.create(
        host=host,
        title="Winter Dinner",
        start_at=start,
        end_at=start + timedelta(hours=3),
    )


@pytest.fixture
def past_event(host):
    """Event that started yesterday (RSVP window closed)."""
    start = timezone.now() - timedelta(days=1)
    return Event.objects.create(
        host=host,
        title="Last Night",
        start_at=start,
        end_at=start + timedelta(hours=4),
    )


@pytest.fixture
def group(host, event):
    """Group attached to event, no members yet."""
    group = GuestGroup.objects.create(name="Friends", created_by=host)
    EventGroup.objects.create(event=event, group=group)
    return group


@pytest.fixture
def add_member(group, host):
    """Add a user to the test group directly."""

    def _add(user, to_group=None):
        return GroupMembership.objects.create(
            group=to_group or group, user=user, added_by=host
        )

    return _add


@pytest.fixture
def web_rsvp(event, group):
    """Create an unlinked (web) GuestRecord."""

    def _create(phone, name="Web Guest", rsvp=Rsvp.ACCEPTED, on_event=None, on_group=None, **fields):
        record = GuestRecord(
            event=on_event or event,
            group=on_group if on_group is not None else group,
            rsvp=rsvp,
            **fields,
        )
        record.set_identity(Unlinked(name=name, phone=phone))
        record.save()
        return record

    return _create


@pytest.fixture
def linked_rsvp(event, group):
    """Create a linked GuestRecord for a user."""

    def _create(user, rsvp=Rsvp.ACCEPTED, on_event=None, **fields):
        return GuestRecord.objects.create(
            event=on_event or event,
            group=group,
            user=user,
            rsvp=rsvp,
            **fields,
        )

    return _create
