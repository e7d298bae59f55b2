"""
RSVPman public API.

CORE (route-layer contract):
    RsvpService.create_group(name, creator_id, event_id)
    RsvpService.add_member(group_id, phone, acting_user_id)
    RsvpService.attach_group_to_event(event_id, group_id)
    RsvpService.submit_rsvp(group_id, payload, authenticated_user_id)
    RsvpService.reconcile(user_id, phone)
    RsvpService.guest_list(event_id, **filters)
    RsvpService.rsvp_summary(event_id)

CONVENIENCE:
    RsvpService.remove_member / delete_group / verify_otp / onboard
    RsvpService.update_profile

Every method returns a ServiceResult; RsvpmanError never escapes.
"""

import logging
from dataclasses import dataclass
from typing import Any

from rsvpman.exceptions import RsvpmanError
from rsvpman.gates import Gates
from rsvpman.services import groups, guests, reconciliation, reports, users, verification
from rsvpman.services.guests import RsvpPayload

logger = logging.getLogger(__name__)


@dataclass
class ServiceResult:
    """Success/error envelope handed to the route layer."""

    success: bool
    value: Any = None
    error_code: str | None = None
    error_kind: str | None = None
    message: str | None = None
    error_data: dict | None = None

    @classmethod
    def ok(cls, value=None, message: str | None = None) -> "ServiceResult":
        return cls(success=True, value=value, message=message)

    @classmethod
    def fail(cls, error: RsvpmanError) -> "ServiceResult":
        return cls(
            success=False,
            error_code=error.code,
            error_kind=error.kind,
            message=error.message,
            error_data=error.data,
        )


class RsvpService:
    """
    RSVPman public API.

    Uses @classmethod so projects can subclass and override single calls.
    """

    @classmethod
    def _run(cls, operation: str, func, *args, **kwargs) -> ServiceResult:
        try:
            value = func(*args, **kwargs)
        except RsvpmanError as e:
            logger.info("%s failed: [%s] %s", operation, e.code, e.message)
            return ServiceResult.fail(e)
        return ServiceResult.ok(value, getattr(value, "message", None))

    # ======================================================================
    # CORE API
    # ======================================================================

    @classmethod
    def create_group(cls, name: str, creator_id, event_id) -> ServiceResult:
        """value: GuestGroup"""
        return cls._run("create_group", groups.create_group, name, creator_id, event_id)

    @classmethod
    def add_member(cls, group_id, phone: str, acting_user_id=None) -> ServiceResult:
        """value: GroupMembership (ALREADY_MEMBER / *_NOT_FOUND on error)"""
        return cls._run("add_member", groups.add_member, group_id, phone, acting_user_id)

    @classmethod
    def attach_group_to_event(cls, event_id, group_id) -> ServiceResult:
        """value: list of newly created GuestRecords"""
        return cls._run(
            "attach_group_to_event", guests.attach_group_to_event, event_id, group_id
        )

    @classmethod
    def submit_rsvp(
        cls,
        group_id,
        payload: RsvpPayload | dict,
        authenticated_user_id=None,
        event_id=None,
    ) -> ServiceResult:
        """
        value: RsvpSubmission

        payload may be a plain dict (request body).
        """

        def _submit():
            data = RsvpPayload.from_dict(payload) if isinstance(payload, dict) else payload
            return guests.submit_rsvp(
                group_id,
                data,
                authenticated_user_id=authenticated_user_id,
                event_id=event_id,
            )

        return cls._run("submit_rsvp", _submit)

    @classmethod
    def reconcile(cls, user_id, phone: str) -> ServiceResult:
        """
        Link anonymous RSVPs of phone to user_id.

        The user must own phone and be verified. value: LinkResult
        """

        def _reconcile():
            user = users.require(user_id)
            Gates.reconcile_evidence(user, phone)
            return reconciliation.link_rsvps(user, phone)

        return cls._run("reconcile", _reconcile)

    @classmethod
    def guest_list(cls, event_id, **filters) -> ServiceResult:
        """value: GuestList(linked, unlinked)"""
        return cls._run("guest_list", reports.guest_list, event_id, **filters)

    @classmethod
    def rsvp_summary(cls, event_id) -> ServiceResult:
        """value: RsvpSummary"""
        return cls._run("rsvp_summary", reports.rsvp_summary, event_id)

    # ======================================================================
    # CONVENIENCE API
    # ======================================================================

    @classmethod
    def remove_member(cls, group_id, phone: str) -> ServiceResult:
        return cls._run("remove_member", groups.remove_member, group_id, phone)

    @classmethod
    def delete_group(cls, group_id) -> ServiceResult:
        """value: GroupDeletion"""
        return cls._run("delete_group", groups.delete_group, group_id)

    @classmethod
    def verify_otp(cls, phone: str, code: str) -> ServiceResult:
        """value: VerificationOutcome"""
        return cls._run("verify_otp", verification.verify_otp, phone, code)

    @classmethod
    def onboard(cls, phone: str, name: str, **profile) -> ServiceResult:
        """value: OnboardingResult"""
        return cls._run("onboard", verification.onboard, phone, name, **profile)

    @classmethod
    def update_profile(cls, user_id, **profile) -> ServiceResult:
        """value: User"""
        return cls._run("update_profile", users.update_profile, user_id, **profile)
