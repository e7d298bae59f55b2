"""
RSVPman configuration.

Usage in settings.py:
    RSVPMAN = {
        "CONFLICT_POLICY": "linked_wins",
        "OTP_BACKEND": "myproject.otp.TwilioVerifyBackend",
        "INVITE_BASE_URL": "https://app.example.com",
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


LINKED_WINS = "linked_wins"
MOST_RECENT = "most_recent"
CONFLICT_POLICIES = (LINKED_WINS, MOST_RECENT)


@dataclass
class RsvpmanSettings:
    """RSVPman configuration settings."""

    # Reconciliation: what happens when a user already has a linked RSVP
    # for an event that also has an anonymous RSVP under their phone.
    # attach_group_to_event() gives every member a linked no_response row,
    # so with linked_wins a member's later web answer for that event is
    # discarded on verification; most_recent keeps the newer web answer.
    CONFLICT_POLICY: str = LINKED_WINS

    # Collaborator backends (dotted paths, loaded with import_string)
    OTP_BACKEND: str = ""
    AUTH_VERIFIER: str = "rsvpman.backends.auth.SignedTokenVerifier"

    # Bearer token lifetime for SignedTokenVerifier (seconds)
    AUTH_TOKEN_MAX_AGE: int = 7 * 24 * 3600

    # Public web invite links
    INVITE_BASE_URL: str = "http://localhost:5173"

    # Party size when a submission does not specify one
    DEFAULT_GUEST_COUNT: int = 1


def get_rsvpman_settings() -> RsvpmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "RSVPMAN", {})
    return RsvpmanSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_rsvpman_settings(), name)


rsvpman_settings = _LazySettings()
