"""Invite model - bulk-imported intended invitee (before any RSVP)."""

from django.db import models
from django.utils.translation import gettext_lazy as _

from rsvpman.utils import normalize_email, normalize_phone


class Invite(models.Model):
    """
    Intended invitee imported in bulk (WhatsApp/spreadsheet lists).

    Distinct from GuestRecord: an Invite says "we mean to invite this phone",
    a GuestRecord carries an actual invitation/RSVP state.
    """

    name = models.CharField(_("name"), max_length=200)
    phone = models.CharField(_("phone"), max_length=20)
    email = models.EmailField(_("email"), blank=True)
    event = models.ForeignKey(
        "rsvpman.Event",
        on_delete=models.CASCADE,
        related_name="invites",
        verbose_name=_("event"),
    )
    group = models.ForeignKey(
        "rsvpman.GuestGroup",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="invites",
        verbose_name=_("group"),
    )
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        db_table = "rsvpman_invite"
        verbose_name = _("invite")
        verbose_name_plural = _("invites")
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["phone", "event"],
                name="rsvpman_unique_invite_phone_event",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.phone})"

    def save(self, *args, **kwargs):
        self.phone = normalize_phone(self.phone)
        self.email = normalize_email(self.email)
        super().save(*args, **kwargs)
