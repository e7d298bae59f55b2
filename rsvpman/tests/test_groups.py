"""Tests for the guest group service."""

import pytest

from rsvpman.exceptions import ErrorKind, RsvpmanError
from rsvpman.models import (
    EventGroup,
    GroupMembership,
    GuestGroup,
    GuestRecord,
    Invite,
    InviteLink,
    User,
    VerificationStatus,
)
from rsvpman.services import groups, guests


pytestmark = pytest.mark.django_db


class TestCreateGroup:
    """Tests for group creation."""

    def test_creates_empty_group_attached_to_event(self, host, event):
        """Create group attached to its event with no members."""
        group = groups.create_group("  Cousins ", host.pk, event.pk)

        assert group.name == "Cousins"
        assert group.created_by == host
        assert group.member_count == 0
        assert list(group.events.all()) == [event]

    def test_requires_name(self, host, event):
        """Blank name is rejected."""
        with pytest.raises(RsvpmanError) as exc:
            groups.create_group("", host.pk, event.pk)
        assert exc.value.kind == ErrorKind.INVALID_ARGUMENT

    def test_unknown_event_creates_nothing(self, host):
        """Unknown event leaves no group behind."""
        with pytest.raises(RsvpmanError) as exc:
            groups.create_group("Cousins", host.pk, "3f0c8ac5-0000-0000-0000-000000000000")
        assert exc.value.code == "EVENT_NOT_FOUND"
        assert not GuestGroup.objects.exists()

    def test_rename(self, group):
        """Rename a group."""
        assert groups.rename_group(group.pk, "Best Friends").name == "Best Friends"


class TestAddMember:
    """Tests for adding members by phone."""

    def test_unknown_phone_gets_placeholder_user(self, group, host):
        """Unknown phone creates an unverified placeholder."""
        membership = groups.add_member(group.pk, "+1 555 444 0000", host.pk)

        user = membership.user
        assert user.phone == "+15554440000"
        assert user.verification_status == VerificationStatus.UNVERIFIED
        assert membership.added_by == host
        assert list(groups.members(group.pk)) == [user]

    def test_existing_user_is_reused(self, group, verified_user):
        """Known phone reuses the existing user."""
        membership = groups.add_member(group.pk, verified_user.phone)
        assert membership.user == verified_user
        assert User.objects.filter(phone=verified_user.phone).count() == 1

    def test_already_member(self, group, verified_user):
        """Adding twice raises ALREADY_MEMBER."""
        groups.add_member(group.pk, verified_user.phone)
        with pytest.raises(RsvpmanError) as exc:
            groups.add_member(group.pk, verified_user.phone)
        assert exc.value.code == "ALREADY_MEMBER"
        assert exc.value.kind == ErrorKind.ALREADY_EXISTS
        assert GroupMembership.objects.filter(group=group).count() == 1

    def test_does_not_create_guest_records(self, group, verified_user):
        """Membership alone creates no guest records."""
        groups.add_member(group.pk, verified_user.phone)
        assert not GuestRecord.objects.exists()

    def test_invalid_phone(self, group):
        """Malformed phone is rejected."""
        with pytest.raises(RsvpmanError) as exc:
            groups.add_member(group.pk, "not a phone")
        assert exc.value.code == "INVALID_PHONE"

    def test_unknown_group(self, db):
        """Unknown group raises GROUP_NOT_FOUND."""
        with pytest.raises(RsvpmanError) as exc:
            groups.add_member("3f0c8ac5-0000-0000-0000-000000000000", "+15554440000")
        assert exc.value.code == "GROUP_NOT_FOUND"


class TestRemoveMember:
    """Tests for removing members."""

    def test_removes_membership_and_detaches_records(self, event, group, verified_user):
        """Remove membership and detach the member's records."""
        groups.add_member(group.pk, verified_user.phone)
        guests.attach_group_to_event(event.pk, group.pk)

        detached = groups.remove_member(group.pk, verified_user.phone)

        assert detached == 1
        assert not GroupMembership.objects.filter(group=group).exists()
        record = GuestRecord.objects.get(event=event, user=verified_user)
        assert record.group is None

    def test_not_a_member(self, group, verified_user):
        """Removing a non-member raises NOT_MEMBER."""
        with pytest.raises(RsvpmanError) as exc:
            groups.remove_member(group.pk, verified_user.phone)
        assert exc.value.code == "NOT_MEMBER"

    def test_unknown_phone(self, group):
        """Removing an unknown phone raises USER_NOT_FOUND."""
        with pytest.raises(RsvpmanError) as exc:
            groups.remove_member(group.pk, "+15559990000")
        assert exc.value.code == "USER_NOT_FOUND"


class TestDeleteGroup:
    """Tests for group deletion."""

    def test_three_members_two_events(self, host, event, second_event, group, web_rsvp):
        """Delete group and report what was removed."""
        for phone in ("+15554440001", "+15554440002", "+15554440003"):
            groups.add_member(group.pk, phone, host.pk)
        guests.attach_group_to_event(event.pk, group.pk)
        guests.attach_group_to_event(second_event.pk, group.pk)
        web = web_rsvp("+15554440009")
        InviteLink.objects.create(group=group, event=event, created_by=host)
        Invite.objects.create(name="Ivy", phone="+15554440010", event=event, group=group)

        record_ids = set(
            GuestRecord.objects.filter(group=group).values_list("pk", flat=True)
        )
        assert len(record_ids) == 7

        result = groups.delete_group(group.pk)

        assert result.memberships_deleted == 3
        assert result.event_links_deleted == 2
        assert result.records_detached == 7
        assert GroupMembership.objects.count() == 0
        assert EventGroup.objects.count() == 0
        assert not GuestGroup.objects.filter(pk=group.pk).exists()
        assert not InviteLink.objects.exists()
        assert not Invite.objects.exists()

        kept = GuestRecord.objects.filter(pk__in=record_ids)
        assert kept.count() == 7
        assert not kept.filter(group__isnull=False).exists()
        web.refresh_from_db()
        assert web.group is None

    def test_members_survive_as_users(self, host, group):
        """Members keep their user accounts."""
        groups.add_member(group.pk, "+15554440001", host.pk)
        groups.delete_group(group.pk)
        assert User.objects.filter(phone="+15554440001").exists()

    def test_unknown_group(self, db):
        """Unknown group raises GROUP_NOT_FOUND."""
        with pytest.raises(RsvpmanError) as exc:
            groups.delete_group("3f0c8ac5-0000-0000-0000-000000000000")
        assert exc.value.code == "GROUP_NOT_FOUND"


class TestQueries:
    """Group lookups."""

    def test_groups_for_event(self, host, event, group):
        """List groups attached to an event."""
        other = groups.create_group("Acquaintances", host.pk, event.pk)
        assert groups.groups_for_event(event.pk) == [other, group]
