"""User model - the Identity Store.

Phone is the identity key: one User per normalized phone, never changed
after creation. A User is created either at onboarding (already verified) or
as an unverified placeholder when a host adds an unknown phone to a group.
"""

import uuid

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from rsvpman.utils import normalize_email, normalize_phone


class VerificationStatus(models.TextChoices):
    UNVERIFIED = "unverified", _("Unverified")
    VERIFIED = "verified", _("Verified")


class Gender(models.TextChoices):
    MALE = "M", _("Male")
    FEMALE = "F", _("Female")
    UNSPECIFIED = "unspecified", _("Unspecified")


class User(models.Model):
    """App account holder, addressed by phone number."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    phone = models.CharField(
        _("phone"),
        max_length=20,
        unique=True,
        help_text=_("Normalized phone number (+15550102030)."),
    )
    name = models.CharField(_("name"), max_length=200, blank=True)
    email = models.EmailField(_("email"), blank=True)

    verification_status = models.CharField(
        _("verification status"),
        max_length=20,
        choices=VerificationStatus.choices,
        default=VerificationStatus.UNVERIFIED,
        db_index=True,
    )
    verified_at = models.DateTimeField(_("verified at"), null=True, blank=True)

    # Onboarding profile
    date_of_birth = models.DateField(_("date of birth"), null=True, blank=True)
    gender = models.CharField(
        _("gender"),
        max_length=20,
        choices=Gender.choices,
        default=Gender.UNSPECIFIED,
    )
    preferred_language = models.CharField(_("preferred language"), max_length=20, blank=True)
    profile_pic = models.URLField(_("profile picture"), max_length=500, blank=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "rsvpman_user"
        verbose_name = _("user")
        verbose_name_plural = _("users")
        ordering = ["name", "phone"]

    def __str__(self):
        return f"{self.name or '?'} ({self.phone_masked})"

    @property
    def is_verified(self) -> bool:
        return self.verification_status == VerificationStatus.VERIFIED

    @property
    def phone_masked(self) -> str:
        """Masked phone for safe display."""
        if len(self.phone) > 4:
            return "***" + self.phone[-4:]
        return "****"

    def save(self, *args, **kwargs):
        self.phone = normalize_phone(self.phone)
        self.email = normalize_email(self.email)
        super().save(*args, **kwargs)

    def mark_verified(self) -> bool:
        """
        Transition unverified -> verified.

        Returns True when the status actually changed. There is no way back.
        """
        if self.is_verified:
            return False
        self.verification_status = VerificationStatus.VERIFIED
        self.verified_at = timezone.now()
        self.save(update_fields=["verification_status", "verified_at", "updated_at"])
        return True
