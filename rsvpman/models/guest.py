"""GuestRecord model - one person's invitation + RSVP for one event.

Identity is either Linked (user set, contact fields null) or Unlinked
(user null, name/phone/email set). See rsvpman.identity.
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _

from rsvpman.identity import GuestIdentity, Linked, Unlinked


class Rsvp(models.TextChoices):
    NO_RESPONSE = "no_response", _("No response")
    ACCEPTED = "accepted", _("Accepted")
    DECLINED = "declined", _("Declined")
    MAYBE = "maybe", _("Maybe")
    FAILED_DELIVERY = "failed_delivery", _("Failed delivery")


PREFERENCE_FIELDS = ("food", "alcohol", "accommodation")


class GuestRecordQuerySet(models.QuerySet):
    def linked(self):
        return self.filter(user__isnull=False)

    def unlinked(self):
        return self.filter(user__isnull=True)

    def for_phone(self, phone: str):
        """Unlinked rows captured under phone."""
        from rsvpman.utils import normalize_phone

        return self.unlinked().filter(phone=normalize_phone(phone))


class GuestRecord(models.Model):
    """
    Invitation + RSVP state of one identity for one event.

    Rules:
    - Exactly one identity form (linked XOR unlinked), checked in save()
      and by rsvpman_guest_identity_xor
    - (event, user) unique for linked rows
    - (event, group, phone) unique for unlinked rows
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(
        "rsvpman.Event",
        on_delete=models.CASCADE,
        related_name="guests",
        verbose_name=_("event"),
    )
    group = models.ForeignKey(
        "rsvpman.GuestGroup",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="guests",
        verbose_name=_("group"),
    )

    # Linked identity
    user = models.ForeignKey(
        "rsvpman.User",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="guest_records",
        verbose_name=_("user"),
    )

    # Unlinked identity
    name = models.CharField(_("name"), max_length=200, null=True, blank=True)
    phone = models.CharField(_("phone"), max_length=20, null=True, blank=True, db_index=True)
    email = models.EmailField(_("email"), null=True, blank=True)

    # Response
    rsvp = models.CharField(
        _("RSVP"),
        max_length=20,
        choices=Rsvp.choices,
        default=Rsvp.NO_RESPONSE,
        db_index=True,
    )
    food = models.CharField(_("food"), max_length=100, blank=True)
    alcohol = models.CharField(_("alcohol"), max_length=100, blank=True)
    accommodation = models.CharField(_("accommodation"), max_length=100, blank=True)
    count = models.PositiveIntegerField(_("party size"), default=1)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    objects = GuestRecordQuerySet.as_manager()

    class Meta:
        db_table = "rsvpman_guest"
        verbose_name = _("guest")
        verbose_name_plural = _("guests")
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user"],
                condition=models.Q(user__isnull=False),
                name="rsvpman_unique_linked_guest",
            ),
            models.UniqueConstraint(
                fields=["event", "group", "phone"],
                condition=models.Q(user__isnull=True),
                name="rsvpman_unique_unlinked_guest",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(
                        user__isnull=False,
                        name__isnull=True,
                        phone__isnull=True,
                        email__isnull=True,
                    )
                    | models.Q(user__isnull=True, name__isnull=False, phone__isnull=False)
                ),
                name="rsvpman_guest_identity_xor",
            ),
        ]
        indexes = [
            models.Index(fields=["event", "rsvp"], name="rsvpman_guest_event_rsvp_idx"),
        ]

    def __str__(self):
        who = self.user.name if self.user_id and self.user else self.name
        return f"{who or '?'} -> {self.event_id} [{self.rsvp}]"

    @property
    def is_linked(self) -> bool:
        return self.user_id is not None

    @property
    def identity(self) -> GuestIdentity:
        if self.user_id is not None:
            return Linked(self.user_id)
        return Unlinked(name=self.name, phone=self.phone, email=self.email or "")

    def set_identity(self, identity: GuestIdentity) -> None:
        """Write identity columns from a Linked/Unlinked value (does not save)."""
        if isinstance(identity, Linked):
            self.user_id = identity.user_id
            self.name = None
            self.phone = None
            self.email = None
        elif isinstance(identity, Unlinked):
            self.user = None
            self.name = identity.name
            self.phone = identity.phone
            self.email = identity.email or None
        else:
            raise TypeError(f"Unknown identity: {identity!r}")

    @property
    def display_name(self) -> str:
        if self.is_linked:
            return self.user.name
        return self.name or ""

    @property
    def display_phone(self) -> str:
        if self.is_linked:
            return self.user.phone
        return self.phone or ""

    def preferences(self) -> dict:
        return {field: getattr(self, field) for field in PREFERENCE_FIELDS}

    def clean(self):
        linked = self.user_id is not None
        has_contact = any([self.name, self.phone, self.email])
        if linked and has_contact:
            raise ValidationError(_("Linked guest cannot carry contact fields."))
        if not linked and not (self.name and self.phone):
            raise ValidationError(_("Unlinked guest requires name and phone."))

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)
