"""
RSVPman Gates - Validation rules.

G1: RsvpWindow - RSVPs are accepted only before the event starts
G2: RsvpValue - RSVP must be one of the Rsvp choices
G3: PartySize - count must be a positive integer
G4: PhoneFormat - phone must normalize to an identity key
G5: AnonymousContact - web submissions carry name + phone
G6: HostAccess - only host/co-hosts read guest lists and summaries
G7: ReconcileEvidence - linking needs a verified owner of the phone
"""

import re
from dataclasses import dataclass

from rsvpman.exceptions import RsvpmanError
from rsvpman.utils import normalize_phone

_PHONE_RE = re.compile(r"^\+?\d{3,15}$")


def _text(value) -> str:
    return value.strip() if isinstance(value, str) else ""


class GateError(RsvpmanError):
    """Gate validation error."""

    def __init__(self, gate_name: str, code: str, message: str | None = None, **data):
        self.gate_name = gate_name
        super().__init__(code, message, **data)


@dataclass
class GateResult:
    """Result of a gate check."""

    passed: bool
    gate_name: str
    message: str = ""


# =============================================================================
# Gates
# =============================================================================


class Gates:
    """RSVPman validation gates."""

    # =========================================================================
    # G1: RSVP window
    # =========================================================================

    @classmethod
    def rsvp_window(cls, event) -> GateResult:
        """
        G1: Event must not have started yet.

        Raises:
            GateError(RSVP_WINDOW_CLOSED)
        """
        if event.has_started:
            raise GateError(
                "G1_RsvpWindow",
                "RSVP_WINDOW_CLOSED",
                event_id=str(event.pk),
            )
        return GateResult(True, "G1_RsvpWindow")

    @classmethod
    def check_rsvp_window(cls, event) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.rsvp_window(event)
            return True
        except GateError:
            return False

    # =========================================================================
    # G2: RSVP value
    # =========================================================================

    @classmethod
    def rsvp_value(cls, value: str) -> GateResult:
        """G2: RSVP must be a known choice."""
        from rsvpman.models import Rsvp

        if value not in Rsvp.values:
            raise GateError(
                "G2_RsvpValue",
                "INVALID_RSVP",
                f"Invalid RSVP value: {value!r}",
                allowed=list(Rsvp.values),
            )
        return GateResult(True, "G2_RsvpValue")

    # =========================================================================
    # G3: Party size
    # =========================================================================

    @classmethod
    def party_size(cls, count) -> GateResult:
        """G3: count >= 1."""
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise GateError("G3_PartySize", "INVALID_COUNT", count=count)
        return GateResult(True, "G3_PartySize")

    # =========================================================================
    # G4: Phone format
    # =========================================================================

    @classmethod
    def phone_format(cls, phone: str | None) -> GateResult:
        """G4: phone normalizes to "+" and 3-15 digits."""
        if not _PHONE_RE.match(normalize_phone(phone)):
            raise GateError("G4_PhoneFormat", "INVALID_PHONE", phone=phone)
        return GateResult(True, "G4_PhoneFormat")

    @classmethod
    def check_phone_format(cls, phone: str | None) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.phone_format(phone)
            return True
        except GateError:
            return False

    # =========================================================================
    # G5: Anonymous contact
    # =========================================================================

    @classmethod
    def anonymous_contact(cls, name: str | None, phone: str | None) -> GateResult:
        """
        G5: An anonymous submission identifies itself by name + phone.

        Raises:
            GateError(MISSING_CONTACT) or GateError(INVALID_PHONE)
        """
        if not _text(name) or not _text(phone):
            raise GateError("G5_AnonymousContact", "MISSING_CONTACT")
        cls.phone_format(phone)
        return GateResult(True, "G5_AnonymousContact")

    # =========================================================================
    # G6: Host access
    # =========================================================================

    @classmethod
    def host_access(cls, event, user_id) -> GateResult:
        """
        G6: user_id is the event host or a co-host.

        Enforced by callers (routes); the core only exposes the check.
        """
        if not event.is_host_or_cohost(user_id):
            raise GateError(
                "G6_HostAccess",
                "NOT_HOST",
                event_id=str(event.pk),
            )
        return GateResult(True, "G6_HostAccess")

    @classmethod
    def check_host_access(cls, event, user_id) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.host_access(event, user_id)
            return True
        except GateError:
            return False

    # =========================================================================
    # G7: Reconcile evidence
    # =========================================================================

    @classmethod
    def reconcile_evidence(cls, user, phone: str) -> GateResult:
        """
        G7: Anonymous RSVPs may only be linked into the verified owner of phone.

        Raises:
            GateError(PHONE_MISMATCH) or GateError(NOT_VERIFIED)
        """
        if normalize_phone(phone) != user.phone:
            raise GateError(
                "G7_ReconcileEvidence",
                "PHONE_MISMATCH",
                user_id=str(user.pk),
            )
        if not user.is_verified:
            raise GateError(
                "G7_ReconcileEvidence",
                "NOT_VERIFIED",
                user_id=str(user.pk),
            )
        return GateResult(True, "G7_ReconcileEvidence")

    @classmethod
    def check_reconcile_evidence(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.reconcile_evidence(*args, **kwargs)
            return True
        except GateError:
            return False
