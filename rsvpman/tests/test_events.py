"""Tests for the event and user services."""

from datetime import datetime, timedelta

import pytest
from django.utils import timezone

from rsvpman.exceptions import RsvpmanError
from rsvpman.models import User
from rsvpman.services import events, users


pytestmark = pytest.mark.django_db


class TestCreateEvent:
    """Tests for event creation."""

    def test_creates_with_whitelisted_fields(self, host):
        """Unknown fields are ignored on create."""
        start = timezone.now() + timedelta(days=3)

        event = events.create_event(
            host.pk, "Picnic", start, start + timedelta(hours=2), location="Park", rsvp="ignored"
        )

        assert event.host == host
        assert event.location == "Park"
        assert event.has_started is False

    def test_end_before_start(self, host):
        """End before start is rejected."""
        start = timezone.now() + timedelta(days=3)
        with pytest.raises(RsvpmanError) as exc:
            events.create_event(host.pk, "Picnic", start, start)
        assert exc.value.code == "INVALID_SCHEDULE"

    def test_naive_times_rejected(self, host):
        """Naive datetimes are rejected."""
        start = datetime(2030, 1, 1, 18, 0)
        with pytest.raises(RsvpmanError) as exc:
            events.create_event(host.pk, "Picnic", start, start + timedelta(hours=1))
        assert exc.value.code == "INVALID_SCHEDULE"


class TestUpdateEvent:
    """Tests for event updates."""

    def test_schedule_checked_as_a_whole(self, event):
        """New start is checked against the stored end."""
        with pytest.raises(RsvpmanError):
            events.update_event(event.pk, end_at=event.start_at - timedelta(hours=1))

        updated = events.update_event(event.pk, title="Summer Bash", location=None)
        assert updated.title == "Summer Bash"
        assert updated.location == "Rooftop"

    def test_cohosts(self, event, verified_user):
        """Set and clear co-hosts."""
        events.add_cohost(event.pk, verified_user.pk)
        assert events.is_host_or_cohost(verified_user.pk, event.pk)

        events.remove_cohost(event.pk, verified_user.pk)
        assert events.is_host_or_cohost(verified_user.pk, event.pk) is False


class TestEnsureUser:
    """Tests for placeholder user creation."""

    def test_creates_placeholder_once(self, db):
        """Unknown phone creates one unverified user."""
        user, created = users.ensure_user("+1 555 303 0000")
        again, created_again = users.ensure_user("+15553030000")

        assert created is True
        assert created_again is False
        assert again.pk == user.pk
        assert user.is_verified is False

    def test_rejects_invalid_phone(self, db):
        """Malformed phone raises INVALID_PHONE."""
        with pytest.raises(RsvpmanError) as exc:
            users.ensure_user("12")
        assert exc.value.code == "INVALID_PHONE"
        assert not User.objects.exists()

    def test_update_contact(self, verified_user):
        """Contact refresh only writes supplied values."""
        assert users.update_contact(verified_user, name="  ", email=None) == []
        assert users.update_contact(verified_user, name="Vera", email="V@Example.com") == [
            "name",
            "email",
        ]
        verified_user.refresh_from_db()
        assert (verified_user.name, verified_user.email) == ("Vera", "v@example.com")
