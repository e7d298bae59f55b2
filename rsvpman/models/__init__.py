"""RSVPman models."""

from rsvpman.models.user import User, VerificationStatus, Gender
from rsvpman.models.verified_phone import VerifiedPhone
from rsvpman.models.event import Event
from rsvpman.models.group import GuestGroup, GroupMembership, EventGroup, InviteLink
from rsvpman.models.guest import GuestRecord, Rsvp, PREFERENCE_FIELDS
from rsvpman.models.invite import Invite

__all__ = [
    # Identity store
    "User",
    "VerificationStatus",
    "Gender",
    "VerifiedPhone",
    # Events
    "Event",
    # Groups
    "GuestGroup",
    "GroupMembership",
    "EventGroup",
    "InviteLink",
    # Guest records
    "GuestRecord",
    "Rsvp",
    "PREFERENCE_FIELDS",
    "Invite",
]
