"""GuestGroup models.

A group is a named, reusable list of invitees. It can be attached to several
events (EventGroup) and shared through invite links (InviteLink).
"""

import secrets
import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


def _new_token() -> str:
    return secrets.token_urlsafe(16)


class GuestGroup(models.Model):
    """Named collection of invitees, reusable across events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("name"), max_length=200)
    created_by = models.ForeignKey(
        "rsvpman.User",
        on_delete=models.PROTECT,
        related_name="created_groups",
        verbose_name=_("created by"),
    )
    members = models.ManyToManyField(
        "rsvpman.User",
        through="rsvpman.GroupMembership",
        through_fields=("group", "user"),
        related_name="guest_groups",
        blank=True,
        verbose_name=_("members"),
    )
    events = models.ManyToManyField(
        "rsvpman.Event",
        through="rsvpman.EventGroup",
        related_name="guest_groups",
        blank=True,
        verbose_name=_("events"),
    )

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "rsvpman_guest_group"
        verbose_name = _("guest group")
        verbose_name_plural = _("guest groups")
        ordering = ["name"]

    def __str__(self):
        return self.name

    @property
    def member_count(self) -> int:
        return self.memberships.count()


class GroupMembership(models.Model):
    """User <-> GuestGroup join row."""

    group = models.ForeignKey(
        GuestGroup,
        on_delete=models.CASCADE,
        related_name="memberships",
        verbose_name=_("group"),
    )
    user = models.ForeignKey(
        "rsvpman.User",
        on_delete=models.CASCADE,
        related_name="memberships",
        verbose_name=_("user"),
    )
    added_by = models.ForeignKey(
        "rsvpman.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("added by"),
    )
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        db_table = "rsvpman_group_membership"
        verbose_name = _("group membership")
        verbose_name_plural = _("group memberships")
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["group", "user"],
                name="rsvpman_unique_group_member",
            ),
        ]

    def __str__(self):
        return f"{self.user} in {self.group}"


class EventGroup(models.Model):
    """Event <-> GuestGroup join row."""

    event = models.ForeignKey(
        "rsvpman.Event",
        on_delete=models.CASCADE,
        related_name="group_links",
        verbose_name=_("event"),
    )
    group = models.ForeignKey(
        GuestGroup,
        on_delete=models.CASCADE,
        related_name="event_links",
        verbose_name=_("group"),
    )
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        db_table = "rsvpman_event_group"
        verbose_name = _("event group")
        verbose_name_plural = _("event groups")
        constraints = [
            models.UniqueConstraint(
                fields=["event", "group"],
                name="rsvpman_unique_event_group",
            ),
        ]

    def __str__(self):
        return f"{self.group} @ {self.event}"


class InviteLink(models.Model):
    """Shareable public link through which a group's invitees RSVP."""

    token = models.CharField(
        _("token"),
        max_length=64,
        unique=True,
        default=_new_token,
        editable=False,
    )
    group = models.ForeignKey(
        GuestGroup,
        on_delete=models.CASCADE,
        related_name="invite_links",
        verbose_name=_("group"),
    )
    event = models.ForeignKey(
        "rsvpman.Event",
        on_delete=models.CASCADE,
        related_name="invite_links",
        verbose_name=_("event"),
    )
    created_by = models.ForeignKey(
        "rsvpman.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("created by"),
    )
    is_active = models.BooleanField(_("active"), default=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        db_table = "rsvpman_invite_link"
        verbose_name = _("invite link")
        verbose_name_plural = _("invite links")
        ordering = ["-created_at"]

    def __str__(self):
        return self.url

    @property
    def url(self) -> str:
        from rsvpman.conf import rsvpman_settings

        base = rsvpman_settings.INVITE_BASE_URL.rstrip("/")
        return f"{base}/invite/{self.group_id}?t={self.token}"
