"""RSVPman protocols."""

from rsvpman.protocols.collaborators import AuthVerifier, OTPBackend

__all__ = [
    "AuthVerifier",
    "OTPBackend",
]
