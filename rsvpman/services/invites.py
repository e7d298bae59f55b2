"""Invite service - bulk invite imports and shareable group links."""

import logging
from dataclasses import dataclass, field

from django.db import IntegrityError, transaction

from rsvpman.exceptions import RsvpmanError
from rsvpman.gates import Gates
from rsvpman.models import EventGroup, GuestGroup, GuestRecord, Invite, InviteLink
from rsvpman.services import events, users
from rsvpman.services.guests import require_group, resolve_event
from rsvpman.utils import get_or_none

logger = logging.getLogger(__name__)


@dataclass
class BulkInviteResult:
    created: list[Invite] = field(default_factory=list)
    failed: list[dict] = field(default_factory=list)


@dataclass
class InviteDetails:
    """What a public invite page shows, plus context for a signed-in viewer."""

    group: object
    event: object
    user_context: dict | None = None


def _failure(row: dict, reason: str) -> dict:
    return {**row, "reason": reason}


def bulk_create_invites(event_id, rows: list[dict]) -> BulkInviteResult:
    """
    Import intended invitees for event_id (WhatsApp/spreadsheet lists).

    Each row is {name, phone (or phone_no), email?, group_id?}. Rows are
    independent: a bad or duplicate row lands in failed with a reason and
    does not affect the others.
    """
    event = events.require(event_id)
    result = BulkInviteResult()

    for row in rows:
        phone = row.get("phone") or row.get("phone_no")
        name = (row.get("name") or "").strip()
        if not name or not phone:
            result.failed.append(_failure(row, RsvpmanError("MISSING_CONTACT").message))
            continue
        if not Gates.check_phone_format(phone):
            result.failed.append(_failure(row, RsvpmanError("INVALID_PHONE").message))
            continue
        group = None
        if row.get("group_id"):
            group = get_or_none(GuestGroup.objects, pk=row["group_id"])
            if group is None:
                result.failed.append(_failure(row, RsvpmanError("GROUP_NOT_FOUND").message))
                continue

        try:
            with transaction.atomic():
                invite = Invite.objects.create(
                    name=name,
                    phone=phone,
                    email=row.get("email") or "",
                    event=event,
                    group=group,
                )
        except IntegrityError:
            result.failed.append(_failure(row, RsvpmanError("DUPLICATE_INVITE").message))
            continue
        result.created.append(invite)

    logger.info(
        "Bulk invites for event %s: %d created, %d failed",
        event.pk,
        len(result.created),
        len(result.failed),
    )
    return result


def generate_invite_link(event_id, group_id, created_by_id=None) -> InviteLink:
    """
    Active shareable link for (event, group); reused when one exists.

    Raises:
        RsvpmanError: EVENT_NOT_FOUND, GROUP_NOT_FOUND, GROUP_NOT_ATTACHED
    """
    event = events.require(event_id)
    link = get_or_none(
        EventGroup.objects.select_related("group"), event=event, group_id=group_id
    )
    if link is None:
        require_group(group_id)
        raise RsvpmanError(
            "GROUP_NOT_ATTACHED", group_id=str(group_id), event_id=str(event.pk)
        )

    existing = InviteLink.objects.filter(
        event=event, group=link.group, is_active=True
    ).first()
    if existing:
        return existing

    created_by = users.get(created_by_id) if created_by_id else None
    return InviteLink.objects.create(
        event=event, group=link.group, created_by=created_by
    )


def revoke_invite_link(event_id, group_id) -> int:
    """
    Deactivate the active links of (event, group).

    The group stays reachable by its plain link; only the revoked tokens stop
    working. The next generate_invite_link() call issues a fresh token.

    Returns:
        Number of links deactivated
    """
    event = events.require(event_id)
    group = require_group(group_id)
    revoked = InviteLink.objects.filter(event=event, group=group, is_active=True).update(
        is_active=False
    )
    logger.info("Revoked %d invite link(s) for group %s, event %s", revoked, group.pk, event.pk)
    return revoked


def require_active_link(group_id, token: str) -> InviteLink:
    """
    InviteLink for token, which must belong to group_id and still be active.

    Raises:
        RsvpmanError(INVITE_LINK_INACTIVE)
    """
    link = get_or_none(InviteLink.objects, token=token, group_id=group_id)
    if link is None or not link.is_active:
        raise RsvpmanError("INVITE_LINK_INACTIVE", group_id=str(group_id))
    return link


def group_invite_details(group_id, user_id=None, event_id=None) -> InviteDetails:
    """
    Event and group behind a public invite link.

    With user_id (signed-in viewer) the result also carries a user_context:
    host flag, the viewer's existing RSVP through this group, and profile
    fields to prefill the form.
    """
    group, event = resolve_event(group_id, event_id)
    Gates.rsvp_window(event)

    details = InviteDetails(group=group, event=event)
    if user_id is None:
        return details

    user = users.require(user_id)
    existing = (
        GuestRecord.objects.filter(user=user, event=event, group=group).first()
    )
    details.user_context = {
        "is_host_or_cohost": event.is_host_or_cohost(user.pk),
        "existing_rsvp": (
            {"rsvp": existing.rsvp, "count": existing.count, **existing.preferences()}
            if existing
            else None
        ),
        "user": {
            "name": user.name,
            "phone": user.phone,
            "email": user.email,
            "verification_status": user.verification_status,
        },
        "can_edit_rsvp": True,
    }
    return details
