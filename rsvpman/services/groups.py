"""Guest group service - the Guest Group Engine.

Groups are created empty and attached to their first event. Members are
addressed by phone; an unknown phone gets an unverified placeholder User
(users.ensure_user), which later verification promotes in place.
"""

import logging
from dataclasses import dataclass

from django.db import IntegrityError, transaction

from rsvpman.exceptions import RsvpmanError
from rsvpman.models import (
    EventGroup,
    GroupMembership,
    GuestGroup,
    GuestRecord,
    Invite,
    InviteLink,
    User,
)
from rsvpman.services import events, users
from rsvpman.services.guests import attach_group_to_event, require_group
from rsvpman.utils import get_or_none

logger = logging.getLogger(__name__)

__all__ = [
    "GroupDeletion",
    "get",
    "require",
    "create_group",
    "rename_group",
    "add_member",
    "remove_member",
    "members",
    "groups_for_event",
    "attach_group_to_event",
    "delete_group",
]


@dataclass
class GroupDeletion:
    """Tally of what delete_group() removed or detached."""

    group_id: str
    records_detached: int = 0
    memberships_deleted: int = 0
    event_links_deleted: int = 0
    invite_links_deleted: int = 0
    invites_deleted: int = 0


def get(group_id) -> GuestGroup | None:
    return get_or_none(GuestGroup.objects, pk=group_id)


require = require_group


def create_group(name: str, creator_id, event_id) -> GuestGroup:
    """
    Create an empty group attached to event_id.

    Raises:
        RsvpmanError: USER_NOT_FOUND, EVENT_NOT_FOUND, INVALID_NAME
    """
    if not (name or "").strip():
        raise RsvpmanError("INVALID_NAME", "Group name is required")
    creator = users.require(creator_id)
    event = events.require(event_id)

    with transaction.atomic():
        group = GuestGroup.objects.create(name=name.strip(), created_by=creator)
        EventGroup.objects.create(event=event, group=group)

    logger.info("Created group %s for event %s", group.pk, event.pk)
    return group


def rename_group(group_id, name: str) -> GuestGroup:
    group = require(group_id)
    if not (name or "").strip():
        raise RsvpmanError("INVALID_NAME", "Group name is required")
    group.name = name.strip()
    group.save(update_fields=["name", "updated_at"])
    return group


def add_member(group_id, phone: str, acting_user_id=None) -> GroupMembership:
    """
    Add the owner of phone to group.

    Unknown phones get an unverified placeholder user. Guest records are
    created by attach_group_to_event(), not here.

    Raises:
        RsvpmanError: GROUP_NOT_FOUND, INVALID_PHONE, ALREADY_MEMBER
    """
    group = require(group_id)
    acting_user = users.get(acting_user_id) if acting_user_id else None
    user, created = users.ensure_user(phone)

    if GroupMembership.objects.filter(group=group, user=user).exists():
        raise RsvpmanError(
            "ALREADY_MEMBER", group_id=str(group.pk), user_id=str(user.pk)
        )

    try:
        with transaction.atomic():
            membership = GroupMembership.objects.create(
                group=group, user=user, added_by=acting_user
            )
    except IntegrityError as exc:
        raise RsvpmanError(
            "ALREADY_MEMBER", group_id=str(group.pk), user_id=str(user.pk)
        ) from exc

    logger.info(
        "Added %s to group %s%s",
        user.phone_masked,
        group.pk,
        " (placeholder user)" if created else "",
    )
    return membership


def remove_member(group_id, phone: str) -> int:
    """
    Remove the owner of phone from group.

    The user's records for the group's events stay, detached from the group.

    Returns:
        Number of records detached
    """
    group = require(group_id)
    user = users.get_by_phone(phone)
    if user is None:
        raise RsvpmanError("USER_NOT_FOUND", phone=phone)

    with transaction.atomic():
        deleted, _ = GroupMembership.objects.filter(group=group, user=user).delete()
        if not deleted:
            raise RsvpmanError(
                "NOT_MEMBER", group_id=str(group.pk), user_id=str(user.pk)
            )
        detached = GuestRecord.objects.filter(
            user=user,
            group=group,
            event_id__in=group.event_links.values("event_id"),
        ).update(group=None)

    logger.info("Removed %s from group %s", user.phone_masked, group.pk)
    return detached


def members(group_id) -> list[User]:
    group = require(group_id)
    return list(group.members.order_by("name", "phone"))


def groups_for_event(event_id) -> list[GuestGroup]:
    """Groups attached to event, by name."""
    event = events.require(event_id)
    return list(GuestGroup.objects.filter(event_links__event=event).order_by("name"))


def delete_group(group_id) -> GroupDeletion:
    """
    Delete group in one transaction.

    Guest records are kept with group=None; memberships, event links,
    invite links and bulk invites of the group are removed.
    """
    with transaction.atomic():
        group = get_or_none(GuestGroup.objects.select_for_update(), pk=group_id)
        if group is None:
            raise RsvpmanError("GROUP_NOT_FOUND", group_id=str(group_id))

        result = GroupDeletion(group_id=str(group.pk))
        result.records_detached = GuestRecord.objects.filter(group=group).update(group=None)
        result.memberships_deleted, _ = GroupMembership.objects.filter(group=group).delete()
        result.event_links_deleted, _ = EventGroup.objects.filter(group=group).delete()
        result.invite_links_deleted, _ = InviteLink.objects.filter(group=group).delete()
        result.invites_deleted, _ = Invite.objects.filter(group=group).delete()
        group.delete()

    logger.info(
        "Deleted group %s (%d records detached, %d members)",
        result.group_id,
        result.records_detached,
        result.memberships_deleted,
    )
    return result
