"""
RSVPman signals - public event API.

Emitted signals:
- rsvp_submitted: Emitted by services.guests.submit_rsvp()
- rsvps_linked: Emitted by services.reconciliation.link_rsvps() (on commit)
- user_verified: Emitted when a User transitions unverified -> verified
"""

from django.dispatch import Signal

rsvp_submitted = Signal()  # sender=GuestRecord, record, is_web_submission, created
rsvps_linked = Signal()  # sender=User, user, result
user_verified = Signal()  # sender=User, user
