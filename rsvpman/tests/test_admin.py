"""Tests for RSVPman admin."""

import pytest
from django.contrib import admin

from rsvpman.admin import GuestRecordAdmin, UserAdmin
from rsvpman.models import (
    Event,
    GuestGroup,
    GuestRecord,
    Invite,
    InviteLink,
    User,
    VerifiedPhone,
)


pytestmark = pytest.mark.django_db


class TestRegistration:
    """Admin registration of RSVPman models."""

    @pytest.mark.parametrize(
        "model", [User, VerifiedPhone, Event, GuestGroup, GuestRecord, Invite, InviteLink]
    )
    def test_registered(self, model):
        """Each model has a ModelAdmin."""
        assert admin.site.is_registered(model)


class TestDisplay:
    """Admin list display helpers."""

    def test_linked_badge(self, verified_user, linked_rsvp, web_rsvp):
        """Linked badge reflects the record identity."""
        model_admin = GuestRecordAdmin(GuestRecord, admin.site)

        linked = model_admin.linked_badge(linked_rsvp(verified_user))
        web = model_admin.linked_badge(web_rsvp("+15551110000"))

        assert linked != web

    def test_verified_badge(self, verified_user, placeholder_user):
        """Verified badge follows verification status."""
        model_admin = UserAdmin(User, admin.site)
        assert model_admin.verified_badge(verified_user) != model_admin.verified_badge(
            placeholder_user
        )

    def test_changelist_renders(self, admin_client, verified_user, linked_rsvp, web_rsvp):
        """Guest record changelist renders for mixed identities."""
        linked_rsvp(verified_user)
        web_rsvp("+15551110000")

        response = admin_client.get("/admin/rsvpman/guestrecord/")

        assert response.status_code == 200
