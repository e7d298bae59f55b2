"""Verification service - OTP outcomes, onboarding, verified transitions.

Phone identity lifecycle:

    no account --OTP ok--> VerifiedPhone --onboard()--> User(verified) + link
    placeholder User(unverified) --OTP ok--> User(verified) + link
    User(verified, no name) --users.update_profile()--> completed profile

Both paths end with link_rsvps() run inside the same transaction as the
status change, and hand back a bearer token from the AUTH_VERIFIER.
"""

import logging
from dataclasses import dataclass
from datetime import date

from django.db import IntegrityError, transaction
from django.utils import timezone

from rsvpman.backends import get_auth_verifier, get_otp_backend
from rsvpman.exceptions import RsvpmanError
from rsvpman.gates import Gates
from rsvpman.models import Gender, User, VerificationStatus, VerifiedPhone
from rsvpman.services import reconciliation, users
from rsvpman.services.reconciliation import LinkResult
from rsvpman.signals import user_verified
from rsvpman.utils import normalize_email, normalize_phone

logger = logging.getLogger(__name__)


@dataclass
class VerificationOutcome:
    """Result of an approved OTP (or explicit upgrade)."""

    phone: str
    user: User | None = None
    verified_phone: VerifiedPhone | None = None
    became_verified: bool = False
    link_result: LinkResult | None = None
    token: str | None = None

    @property
    def needs_onboarding(self) -> bool:
        return self.user is None

    @property
    def needs_profile(self) -> bool:
        """Promoted placeholders have no name yet (see users.update_profile)."""
        return self.user is None or not self.user.name


@dataclass
class OnboardingResult:
    user: User
    created: bool
    link_result: LinkResult
    token: str | None = None


def issue_token(user: User) -> str:
    """Bearer credential for user from the configured AUTH_VERIFIER."""
    return get_auth_verifier().issue(user.pk)


def send_otp(phone: str) -> str:
    """Ask the OTP backend to deliver a code to phone."""
    Gates.phone_format(phone)
    return get_otp_backend().send(normalize_phone(phone))


def verify_otp(phone: str, code: str) -> VerificationOutcome:
    """
    Check code with the OTP backend and apply the result.

    Raises:
        RsvpmanError(OTP_REJECTED): backend did not approve the code
    """
    Gates.phone_format(phone)
    phone = normalize_phone(phone)

    if not code or not get_otp_backend().verify(phone, code):
        logger.warning("OTP rejected for phone ending %s", phone[-4:])
        raise RsvpmanError("OTP_REJECTED")

    return record_verification(phone)


def record_verification(phone: str) -> VerificationOutcome:
    """
    Apply an approved OTP for phone.

    Existing user: promote to verified, link pending RSVPs and issue a
    bearer token.
    No user yet: remember the phone as verified until onboarding.
    """
    phone = normalize_phone(phone)

    with transaction.atomic():
        user = User.objects.select_for_update().filter(phone=phone).first()
        if user is None:
            entry = VerifiedPhone.record(phone)
            return VerificationOutcome(phone=phone, verified_phone=entry)

        became_verified = user.mark_verified()
        link_result = reconciliation.link_rsvps(user, phone)

    if became_verified:
        user_verified.send(sender=User, user=user)
    return VerificationOutcome(
        phone=phone,
        user=user,
        became_verified=became_verified,
        link_result=link_result,
        token=issue_token(user),
    )


def onboard(
    phone: str,
    name: str,
    email: str = "",
    date_of_birth: date | None = None,
    gender: str = Gender.UNSPECIFIED,
    preferred_language: str = "",
    profile_pic: str = "",
) -> OnboardingResult:
    """
    Create the verified account for an OTP-verified phone.

    An unverified placeholder user (added to a group before ever verifying)
    is promoted in place instead of duplicated. A placeholder that already
    verified by OTP is past onboarding (USER_EXISTS) and completes its
    profile with users.update_profile().

    Raises:
        RsvpmanError: PHONE_NOT_VERIFIED, USER_EXISTS, INVALID_NAME
    """
    Gates.phone_format(phone)
    phone = normalize_phone(phone)
    if not (name or "").strip():
        raise RsvpmanError("INVALID_NAME")

    try:
        with transaction.atomic():
            user = User.objects.select_for_update().filter(phone=phone).first()
            if user is not None and user.is_verified:
                raise RsvpmanError("USER_EXISTS", phone=phone)

            entry = (
                VerifiedPhone.objects.select_for_update()
                .filter(phone=phone, consumed_at__isnull=True)
                .first()
            )
            if entry is None:
                raise RsvpmanError("PHONE_NOT_VERIFIED", phone=phone)

            created = user is None
            if created:
                user = User(phone=phone)
            user.name = name.strip()
            user.email = normalize_email(email)
            user.date_of_birth = date_of_birth
            user.gender = gender or Gender.UNSPECIFIED
            user.preferred_language = preferred_language
            user.profile_pic = profile_pic
            user.verification_status = VerificationStatus.VERIFIED
            user.verified_at = timezone.now()
            user.save()

            entry.consume(user)
            link_result = reconciliation.link_rsvps(user, phone)
    except IntegrityError as exc:
        raise RsvpmanError("CONFLICT", phone=phone) from exc

    logger.info("Onboarded user %s (%s)", user.pk, "new" if created else "promoted")
    user_verified.send(sender=User, user=user)
    return OnboardingResult(
        user=user, created=created, link_result=link_result, token=issue_token(user)
    )


def upgrade_to_verified(user_id) -> VerificationOutcome:
    """Explicit unverified -> verified transition, followed by linking."""
    with transaction.atomic():
        user = users.require(user_id)
        user = User.objects.select_for_update().get(pk=user.pk)
        became_verified = user.mark_verified()
        link_result = reconciliation.link_rsvps(user, user.phone)

    if became_verified:
        user_verified.send(sender=User, user=user)
    return VerificationOutcome(
        phone=user.phone,
        user=user,
        became_verified=became_verified,
        link_result=link_result,
    )
