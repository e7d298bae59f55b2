"""RSVP reconciliation - merge anonymous RSVPs into a verified account.

Triggered whenever a phone becomes a verified, addressable User (OTP
verification of an existing user, onboarding, explicit upgrade). Every
unlinked GuestRecord captured under the phone is either converted into a
linked record of the user, or, when the user already has a linked record
for that event, resolved by CONFLICT_POLICY and removed.

One pass = one transaction: a failure anywhere rolls back every merge of
the pass, so callers can retry safely.
"""

import logging
from dataclasses import dataclass, field

from django.core.exceptions import ImproperlyConfigured
from django.db import transaction

from rsvpman.conf import CONFLICT_POLICIES, MOST_RECENT, rsvpman_settings
from rsvpman.identity import Linked
from rsvpman.models import GuestRecord, PREFERENCE_FIELDS, User, VerificationStatus
from rsvpman.signals import rsvps_linked
from rsvpman.utils import normalize_phone

logger = logging.getLogger(__name__)

NO_PREVIOUS_RSVPS = "No previous RSVPs found"


@dataclass
class LinkResult:
    """Outcome of one reconciliation pass."""

    linked_count: int = 0
    linked_records: list[GuestRecord] = field(default_factory=list)
    discarded_count: int = 0
    message: str = NO_PREVIOUS_RSVPS


def _conflict_policy() -> str:
    policy = rsvpman_settings.CONFLICT_POLICY
    if policy not in CONFLICT_POLICIES:
        raise ImproperlyConfigured(
            f"RSVPMAN['CONFLICT_POLICY'] must be one of {CONFLICT_POLICIES}, got {policy!r}"
        )
    return policy


def _summary(linked_count: int) -> str:
    if linked_count == 0:
        return NO_PREVIOUS_RSVPS
    plural = "" if linked_count == 1 else "s"
    return f"Linked {linked_count} previous RSVP{plural} to your account"


def _resolve_conflict(survivor: GuestRecord, duplicate: GuestRecord, policy, survivor_answered_at) -> None:
    """
    Decide what the surviving linked record keeps from a duplicate.

    linked_wins: the linked record is authoritative, duplicate is dropped as-is.
    most_recent: the later answer is copied onto the linked record.
    """
    if policy != MOST_RECENT or duplicate.updated_at <= survivor_answered_at:
        logger.info(
            "Discarding web RSVP %s for event %s (linked record %s kept)",
            duplicate.pk,
            duplicate.event_id,
            survivor.pk,
        )
        return

    survivor.rsvp = duplicate.rsvp
    survivor.count = duplicate.count
    for name in PREFERENCE_FIELDS:
        setattr(survivor, name, getattr(duplicate, name))
    if duplicate.group_id:
        survivor.group_id = duplicate.group_id
    survivor.save()
    logger.info(
        "Applied newer web RSVP %s onto linked record %s", duplicate.pk, survivor.pk
    )


def link_rsvps(user: User, phone: str | None = None) -> LinkResult:
    """
    Link every unlinked RSVP captured under phone to user.

    Args:
        user: Account that owns phone
        phone: Phone to reconcile (defaults to user.phone)

    Returns:
        LinkResult (linked_count == 0 on a repeated pass)
    """
    phone = normalize_phone(phone or user.phone)
    policy = _conflict_policy()
    result = LinkResult()
    # updated_at of linked records before this pass touched them
    answered_at = {}

    with transaction.atomic():
        candidates = list(
            GuestRecord.objects.for_phone(phone)
            .select_for_update()
            .order_by("-updated_at", "-created_at")
        )

        for record in candidates:
            survivor = (
                GuestRecord.objects.select_for_update()
                .filter(event_id=record.event_id, user=user)
                .first()
            )
            if survivor is not None:
                answered_at.setdefault(survivor.pk, survivor.updated_at)
                _resolve_conflict(survivor, record, policy, answered_at[survivor.pk])
                record.delete()
                result.discarded_count += 1
                continue

            answered_at[record.pk] = record.updated_at
            record.set_identity(Linked(user.pk))
            record.save(update_fields=["user", "name", "phone", "email", "updated_at"])
            result.linked_records.append(record)

        result.linked_count = len(result.linked_records)
        result.message = _summary(result.linked_count)

        if result.linked_count or result.discarded_count:
            transaction.on_commit(
                lambda: rsvps_linked.send(sender=User, user=user, result=result)
            )

    if result.linked_count or result.discarded_count:
        logger.info(
            "Reconciled %s: %d linked, %d discarded",
            user.phone_masked,
            result.linked_count,
            result.discarded_count,
        )
    return result


def pending_users() -> list[User]:
    """Verified users that still have unlinked RSVPs under their phone."""
    phones = (
        GuestRecord.objects.unlinked()
        .values_list("phone", flat=True)
        .distinct()
    )
    return list(
        User.objects.filter(
            phone__in=phones,
            verification_status=VerificationStatus.VERIFIED,
        ).order_by("created_at")
    )


def reconcile_all() -> list[tuple[User, LinkResult]]:
    """
    Backfill pass over every verified user with pending web RSVPs.

    Each user runs in its own transaction (a failure for one user does
    not undo the others).
    """
    return [(user, link_rsvps(user)) for user in pending_users()]
