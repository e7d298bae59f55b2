"""Protocols for external collaborators.

The RSVP core trusts these absolutely: a user id returned by an AuthVerifier
is taken as authenticated, and only the boolean outcome of OTPBackend.verify()
is acted upon.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class AuthVerifier(Protocol):
    """Issues and resolves bearer credentials for verified users."""

    def issue(self, user_id) -> str:
        """Credential for user_id, handed out after OTP verification."""
        ...

    def verify(self, token: str) -> str | None:
        """Return the user id for token, or None if it is not valid."""
        ...


@runtime_checkable
class OTPBackend(Protocol):
    """One-time-password delivery and check (Twilio Verify, etc.)."""

    def send(self, phone: str) -> str:
        """Send a code to phone; returns a provider status string."""
        ...

    def verify(self, phone: str, code: str) -> bool:
        """True when the provider approved code for phone."""
        ...
