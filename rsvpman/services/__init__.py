"""RSVPman services.

Module-level functions grouped by concern:
- users: Identity Store (phone -> User, placeholder users)
- verification: OTP outcome tracking, onboarding, verified transitions
- events: event satellite records (host/co-hosts, schedule)
- groups: Guest Group Engine
- guests: Guest Record Engine (attach, RSVP submission)
- reconciliation: RSVP Reconciliation Engine (link anonymous RSVPs)
- reports: read-side aggregation for hosts
- invites: bulk invites and shareable invite links
"""

from rsvpman.services import users
from rsvpman.services import events
from rsvpman.services import guests
from rsvpman.services import groups
from rsvpman.services import reconciliation
from rsvpman.services import verification
from rsvpman.services import reports
from rsvpman.services import invites

__all__ = [
    "users",
    "events",
    "guests",
    "groups",
    "reconciliation",
    "verification",
    "reports",
    "invites",
]
