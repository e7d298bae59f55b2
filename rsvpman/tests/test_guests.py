"""Tests for the guest record service (attach + RSVP submission)."""

from unittest import mock

import pytest
from django.db import IntegrityError

from rsvpman.exceptions import ErrorKind, RsvpmanError
from rsvpman.models import EventGroup, GuestRecord, Rsvp, User
from rsvpman.services import guests
from rsvpman.services.guests import ALREADY_SUBMITTED_MESSAGE, WEB_MESSAGES, RsvpPayload
from rsvpman.signals import rsvp_submitted


pytestmark = pytest.mark.django_db


def web_payload(**overrides):
    data = {"rsvp": Rsvp.ACCEPTED, "name": "Walt Web", "phone": "+15551110000"}
    data.update(overrides)
    return RsvpPayload(**data)


class TestRsvpPayload:
    """Tests for RSVP payload parsing."""

    def test_from_dict_accepts_phone_no_alias(self):
        """phone_no is accepted as phone."""
        payload = RsvpPayload.from_dict(
            {"rsvp": "maybe", "name": "Ana", "phone_no": "+15550101", "count": 2, "extra": 1}
        )
        assert payload.phone == "+15550101"
        assert payload.count == 2

    def test_preferences_only_supplied(self):
        """Only supplied preferences are returned."""
        payload = RsvpPayload(rsvp="accepted", food="veg")
        assert payload.preferences() == {"food": "veg"}

    @pytest.mark.parametrize(
        "data, field",
        [
            ({"rsvp": "accepted", "name": "Walt", "phone": 15551110000}, "phone"),
            ({"rsvp": "accepted", "name": "Walt", "phone_no": 15551110000}, "phone"),
            ({"rsvp": "accepted", "name": ["Walt"], "phone": "+15551110000"}, "name"),
            ({"rsvp": 1, "name": "Walt", "phone": "+15551110000"}, "rsvp"),
            ({"rsvp": "accepted", "food": {"main": "veg"}}, "food"),
        ],
    )
    def test_from_dict_rejects_non_string_text(self, data, field):
        """Non-string text fields raise INVALID_FIELD."""
        with pytest.raises(RsvpmanError) as exc:
            RsvpPayload.from_dict(data)
        assert exc.value.code == "INVALID_FIELD"
        assert exc.value.kind == ErrorKind.INVALID_ARGUMENT
        assert exc.value.data["field"] == field


class TestAttachGroupToEvent:
    """Tests for attaching a group to an event."""

    def test_creates_one_record_per_member(self, second_event, group, add_member, verified_user, placeholder_user):
        """Each member gets a linked no_response record."""
        add_member(verified_user)
        add_member(placeholder_user)

        created = guests.attach_group_to_event(second_event.pk, group.pk)

        assert len(created) == 2
        assert EventGroup.objects.filter(event=second_event, group=group).exists()
        for record in created:
            assert record.is_linked
            assert record.rsvp == Rsvp.NO_RESPONSE
            assert record.count == 1
            assert record.group == group
            assert (record.name, record.phone, record.email) == (None, None, None)

    def test_twice_yields_one_record_per_member(self, event, group, add_member, verified_user, placeholder_user):
        """Re-attaching is idempotent."""
        add_member(verified_user)
        add_member(placeholder_user)

        guests.attach_group_to_event(event.pk, group.pk)
        before = GuestRecord.objects.filter(event=event).count()
        again = guests.attach_group_to_event(event.pk, group.pk)
        after = GuestRecord.objects.filter(event=event).count()

        assert before == after == 2
        assert again == []
        assert EventGroup.objects.filter(event=event, group=group).count() == 1

    def test_skips_members_already_invited(self, event, group, add_member, verified_user, linked_rsvp):
        """Members with a record for the event are skipped."""
        add_member(verified_user)
        linked_rsvp(verified_user, rsvp=Rsvp.DECLINED)

        assert guests.attach_group_to_event(event.pk, group.pk) == []
        assert GuestRecord.objects.get(event=event, user=verified_user).rsvp == Rsvp.DECLINED

    def test_unknown_event(self, group):
        """Unknown event raises EVENT_NOT_FOUND."""
        with pytest.raises(RsvpmanError) as exc:
            guests.attach_group_to_event("3f0c8ac5-0000-0000-0000-000000000000", group.pk)
        assert exc.value.code == "EVENT_NOT_FOUND"


class TestResolveEvent:
    """Tests for resolving the event behind an invite."""

    def test_next_upcoming_event(self, group, event, second_event, past_event):
        """Default is the next upcoming event."""
        EventGroup.objects.create(event=second_event, group=group)
        EventGroup.objects.create(event=past_event, group=group)
        assert guests.resolve_event(group.pk)[1] == event

    def test_falls_back_to_earliest_past_event(self, host, past_event):
        """Only past events: the earliest one is used."""
        from rsvpman.models import GuestGroup

        old = GuestGroup.objects.create(name="Old", created_by=host)
        EventGroup.objects.create(event=past_event, group=old)
        assert guests.resolve_event(old.pk)[1] == past_event

    def test_explicit_event_must_be_attached(self, group, second_event):
        """Explicit event must be attached to the group."""
        with pytest.raises(RsvpmanError) as exc:
            guests.resolve_event(group.pk, second_event.pk)
        assert exc.value.code == "GROUP_NOT_ATTACHED"

    def test_group_without_events(self, host):
        """Group with no events is not found."""
        from rsvpman.models import GuestGroup

        lonely = GuestGroup.objects.create(name="Lonely", created_by=host)
        with pytest.raises(RsvpmanError) as exc:
            guests.resolve_event(lonely.pk)
        assert exc.value.kind == ErrorKind.NOT_FOUND

    def test_malformed_group_id(self, db):
        """Malformed group id is not found."""
        with pytest.raises(RsvpmanError) as exc:
            guests.resolve_event("not-a-uuid")
        assert exc.value.code == "GROUP_NOT_FOUND"


class TestAnonymousSubmission:
    """Tests for web (unlinked) RSVP submission."""

    def test_creates_unlinked_record(self, event, group):
        """First submission creates an unlinked record."""
        result = guests.submit_rsvp(group.pk, web_payload(food="veg", count=3))

        assert result.created
        assert result.is_web_submission
        assert result.show_app_download
        assert result.was_authenticated is False
        assert result.message == WEB_MESSAGES[Rsvp.ACCEPTED]

        record = result.record
        assert record.is_linked is False
        assert record.phone == "+15551110000"
        assert (record.event, record.group) == (event, group)
        assert (record.food, record.count) == ("veg", 3)

    def test_resubmission_is_not_applied(self, event, group):
        """Second submission reports already_submitted and changes nothing."""
        guests.submit_rsvp(group.pk, web_payload())
        result = guests.submit_rsvp(
            group.pk, web_payload(rsvp=Rsvp.DECLINED, phone="+1 555 111 0000")
        )

        assert result.already_submitted
        assert result.message == ALREADY_SUBMITTED_MESSAGE
        records = GuestRecord.objects.filter(event=event, phone="+15551110000")
        assert records.count() == 1
        assert records.get().rsvp == Rsvp.ACCEPTED

    def test_lost_race_reports_already_submitted(self, event, group, web_rsvp):
        """Unique violation on insert reports already_submitted."""
        existing = web_rsvp("+15551110000")

        with mock.patch.object(guests, "_existing_unlinked", side_effect=[None, existing]):
            result = guests.submit_rsvp(group.pk, web_payload())

        assert result.already_submitted
        assert result.record == existing
        assert GuestRecord.objects.filter(event=event).count() == 1

    def test_missing_contact(self, group):
        """Missing phone raises MISSING_CONTACT."""
        with pytest.raises(RsvpmanError) as exc:
            guests.submit_rsvp(group.pk, web_payload(name=""))
        assert exc.value.code == "MISSING_CONTACT"
        assert not GuestRecord.objects.exists()

    def test_invalid_rsvp_value(self, group):
        """Unknown answer raises INVALID_RSVP."""
        with pytest.raises(RsvpmanError) as exc:
            guests.submit_rsvp(group.pk, web_payload(rsvp="yes"))
        assert exc.value.code == "INVALID_RSVP"

    def test_invalid_count(self, group):
        """Non-positive count raises INVALID_COUNT."""
        with pytest.raises(RsvpmanError) as exc:
            guests.submit_rsvp(group.pk, web_payload(count=0))
        assert exc.value.code == "INVALID_COUNT"

    def test_window_closed_before_any_write(self, host, past_event):
        """Closed window writes nothing."""
        from rsvpman.models import GuestGroup

        old = GuestGroup.objects.create(name="Old", created_by=host)
        EventGroup.objects.create(event=past_event, group=old)

        with pytest.raises(RsvpmanError) as exc:
            guests.submit_rsvp(old.pk, web_payload())
        assert exc.value.kind == ErrorKind.EXPIRED
        assert not GuestRecord.objects.exists()

    def test_emits_signal(self, group):
        """rsvp_submitted is sent for web submissions."""
        handler = mock.Mock()
        rsvp_submitted.connect(handler, weak=False)
        try:
            guests.submit_rsvp(group.pk, web_payload())
        finally:
            rsvp_submitted.disconnect(handler)

        handler.assert_called_once()
        assert handler.call_args.kwargs["is_web_submission"] is True


class TestAuthenticatedSubmission:
    """Tests for app (linked) RSVP submission."""

    def test_creates_linked_record(self, event, group, verified_user):
        """First submission creates a linked record."""
        result = guests.submit_rsvp(
            group.pk, RsvpPayload(rsvp=Rsvp.MAYBE), authenticated_user_id=verified_user.pk
        )

        assert result.created
        assert result.was_authenticated
        assert result.is_web_submission is False
        assert result.message == "RSVP submitted successfully"
        assert result.record.user == verified_user
        assert result.record.count == 1

    def test_updates_in_place_and_retags_group(self, host, event, group, verified_user, linked_rsvp):
        """Resubmission updates the record and moves it to the group."""
        from rsvpman.models import GuestGroup

        record = linked_rsvp(verified_user, rsvp=Rsvp.DECLINED, food="meat", count=2)
        other = GuestGroup.objects.create(name="Work", created_by=host)
        EventGroup.objects.create(event=event, group=other)

        result = guests.submit_rsvp(
            other.pk,
            RsvpPayload(rsvp=Rsvp.ACCEPTED, alcohol="wine"),
            authenticated_user_id=verified_user.pk,
        )

        assert result.created is False
        assert result.message == "RSVP updated successfully"
        record.refresh_from_db()
        assert record.rsvp == Rsvp.ACCEPTED
        assert record.group == other
        # Unsupplied fields keep their values
        assert (record.food, record.alcohol, record.count) == ("meat", "wine", 2)
        assert GuestRecord.objects.filter(event=event, user=verified_user).count() == 1

    def test_refreshes_user_contact(self, group, verified_user):
        """Name and email on the form refresh the user."""
        guests.submit_rsvp(
            group.pk,
            RsvpPayload(rsvp=Rsvp.ACCEPTED, name="Vera V.", email="VERA@example.com"),
            authenticated_user_id=verified_user.pk,
        )
        verified_user.refresh_from_db()
        assert verified_user.name == "Vera V."
        assert verified_user.email == "vera@example.com"

    def test_unknown_user(self, group):
        """Unknown user raises USER_NOT_FOUND."""
        with pytest.raises(RsvpmanError) as exc:
            guests.submit_rsvp(
                group.pk,
                RsvpPayload(rsvp=Rsvp.ACCEPTED),
                authenticated_user_id="3f0c8ac5-0000-0000-0000-000000000000",
            )
        assert exc.value.code == "USER_NOT_FOUND"

    def test_integrity_error_surfaces_as_conflict(self, group, verified_user):
        """IntegrityError becomes CONFLICT."""
        with mock.patch.object(GuestRecord, "save", side_effect=IntegrityError("race")):
            with pytest.raises(RsvpmanError) as exc:
                guests.submit_rsvp(
                    group.pk,
                    RsvpPayload(rsvp=Rsvp.ACCEPTED),
                    authenticated_user_id=verified_user.pk,
                )
        assert exc.value.kind == ErrorKind.CONFLICT


class TestReadAndCancel:
    """Tests for reading and cancelling RSVPs."""

    def test_cancel_resets_to_no_response(self, event, verified_user, linked_rsvp):
        """Cancel resets the answer to no_response."""
        linked_rsvp(verified_user, rsvp=Rsvp.ACCEPTED)
        record = guests.cancel_rsvp(verified_user.pk, event.pk)
        assert record.rsvp == Rsvp.NO_RESPONSE

    def test_cancel_without_record(self, event, verified_user):
        """Cancel without a record raises GUEST_NOT_FOUND."""
        with pytest.raises(RsvpmanError) as exc:
            guests.cancel_rsvp(verified_user.pk, event.pk)
        assert exc.value.code == "GUEST_NOT_FOUND"

    def test_user_rsvps_skips_unanswered(self, event, second_event, verified_user, linked_rsvp):
        """User RSVPs leave out unanswered invitations."""
        linked_rsvp(verified_user, rsvp=Rsvp.NO_RESPONSE)
        answered = linked_rsvp(verified_user, rsvp=Rsvp.MAYBE, on_event=second_event)
        assert guests.user_rsvps(verified_user.pk) == [answered]

    def test_group_rsvp_status_prefers_linked(self, group, verified_user, linked_rsvp, web_rsvp):
        """Group status prefers the linked record."""
        web = web_rsvp("+15551110000")
        assert guests.group_rsvp_status(group.pk, "+15551110000") == web

        linked = linked_rsvp(verified_user)
        assert guests.group_rsvp_status(group.pk, verified_user.phone) == linked

    def test_group_rsvp_status_none(self, group):
        """No record for the phone returns None."""
        assert guests.group_rsvp_status(group.pk, "+15559990000") is None
        assert User.objects.count() == 1  # host only, no placeholder created
