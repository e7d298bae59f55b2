"""Event model.

Events are satellites of the RSVP core: the core needs the host/co-host set
(for reporting access checks) and the start time (for the RSVP window).
Type-specific detail payloads (wedding, birthday, ...) live elsewhere.
"""

import uuid

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Event(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(_("title"), max_length=200)
    host = models.ForeignKey(
        "rsvpman.User",
        on_delete=models.PROTECT,
        related_name="hosted_events",
        verbose_name=_("host"),
    )
    co_hosts = models.ManyToManyField(
        "rsvpman.User",
        blank=True,
        related_name="cohosted_events",
        verbose_name=_("co-hosts"),
    )

    start_at = models.DateTimeField(_("starts at"), db_index=True)
    end_at = models.DateTimeField(_("ends at"))
    location = models.CharField(_("location"), max_length=200, blank=True)
    address = models.CharField(_("address"), max_length=500, blank=True)
    invite_message = models.TextField(_("invite message"), blank=True)
    image = models.URLField(_("image"), max_length=500, blank=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "rsvpman_event"
        verbose_name = _("event")
        verbose_name_plural = _("events")
        ordering = ["start_at"]

    def __str__(self):
        return self.title

    @property
    def has_started(self) -> bool:
        """RSVP window is closed once the event starts."""
        return timezone.now() >= self.start_at

    def is_host_or_cohost(self, user_id) -> bool:
        if user_id is None:
            return False
        if str(self.host_id) == str(user_id):
            return True
        return self.co_hosts.filter(pk=user_id).exists()
