"""VerifiedPhone model - phones that passed OTP before an account existed."""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from rsvpman.utils import normalize_phone


class VerifiedPhone(models.Model):
    """
    OTP-verified phone waiting for onboarding.

    Recorded when an OTP succeeds and no User exists for the phone.
    Consumed (stamped, kept for audit) when the account is created.
    """

    phone = models.CharField(_("phone"), max_length=20, unique=True)
    verified_at = models.DateTimeField(_("verified at"), default=timezone.now)
    consumed_at = models.DateTimeField(_("consumed at"), null=True, blank=True)
    consumed_by = models.ForeignKey(
        "rsvpman.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("consumed by"),
    )

    class Meta:
        db_table = "rsvpman_verified_phone"
        verbose_name = _("verified phone")
        verbose_name_plural = _("verified phones")
        ordering = ["-verified_at"]

    def __str__(self):
        state = "consumed" if self.is_consumed else "pending"
        return f"{self.phone} ({state})"

    @property
    def is_consumed(self) -> bool:
        return self.consumed_at is not None

    def save(self, *args, **kwargs):
        self.phone = normalize_phone(self.phone)
        super().save(*args, **kwargs)

    @classmethod
    def record(cls, phone: str) -> "VerifiedPhone":
        """Record (or refresh) a successful OTP for phone."""
        entry, _ = cls.objects.update_or_create(
            phone=normalize_phone(phone),
            defaults={"verified_at": timezone.now(), "consumed_at": None, "consumed_by": None},
        )
        return entry

    @classmethod
    def pending(cls, phone: str) -> "VerifiedPhone | None":
        """Unconsumed entry for phone, if any."""
        return cls.objects.filter(
            phone=normalize_phone(phone), consumed_at__isnull=True
        ).first()

    def consume(self, user) -> None:
        self.consumed_at = timezone.now()
        self.consumed_by = user
        self.save(update_fields=["consumed_at", "consumed_by"])
