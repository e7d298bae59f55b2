"""User service - the Identity Store.

ensure_user() is the only place that creates placeholder (unverified)
users; it is called from the Guest Group Engine.
"""

import logging
from datetime import date

from django.db import IntegrityError, transaction

from rsvpman.exceptions import RsvpmanError
from rsvpman.gates import Gates
from rsvpman.models import Gender, User, VerificationStatus
from rsvpman.utils import get_or_none, normalize_email, normalize_phone

logger = logging.getLogger(__name__)


def get(user_id) -> User | None:
    """Get user by id."""
    return get_or_none(User.objects, pk=user_id)


def require(user_id) -> User:
    """Get user by id or raise USER_NOT_FOUND."""
    user = get(user_id)
    if user is None:
        raise RsvpmanError("USER_NOT_FOUND", user_id=str(user_id))
    return user


def get_by_phone(phone: str) -> User | None:
    """Get user by phone (exact match on normalized form)."""
    phone_normalized = normalize_phone(phone)
    if not phone_normalized:
        return None
    return User.objects.filter(phone=phone_normalized).first()


def ensure_user(phone: str) -> tuple[User, bool]:
    """
    Resolve phone to a User, creating an unverified placeholder if needed.

    Idempotent: concurrent callers for the same phone converge on one row
    (the unique constraint on phone decides the race).

    Returns:
        (User, created)
    """
    Gates.phone_format(phone)
    phone_normalized = normalize_phone(phone)

    existing = get_by_phone(phone_normalized)
    if existing:
        return existing, False

    try:
        with transaction.atomic():
            user = User.objects.create(
                phone=phone_normalized,
                verification_status=VerificationStatus.UNVERIFIED,
            )
    except IntegrityError:
        user = get_by_phone(phone_normalized)
        if user is None:
            raise
        return user, False

    logger.info("Created placeholder user %s for %s", user.pk, user.phone_masked)
    return user, True


def update_contact(user: User, name: str | None = None, email: str | None = None) -> list[str]:
    """
    Refresh name/email when new non-empty values differ.

    Returns the list of changed fields (empty when nothing changed).
    """
    changed = []
    if name and name.strip() and name.strip() != user.name:
        user.name = name.strip()
        changed.append("name")
    if email and normalize_email(email) != user.email:
        user.email = normalize_email(email)
        changed.append("email")
    if changed:
        user.save(update_fields=changed + ["updated_at"])
    return changed


PROFILE_FIELDS = (
    "name",
    "email",
    "date_of_birth",
    "gender",
    "preferred_language",
    "profile_pic",
)


def update_profile(user_id, **fields) -> User:
    """
    Fill in or change a user's profile.

    Only supplied, non-empty values are written; unknown keys are ignored and
    the phone never changes. This is how a placeholder user promoted by OTP
    completes the profile that onboarding would otherwise have collected.

    Raises:
        RsvpmanError: USER_NOT_FOUND, INVALID_NAME, INVALID_FIELD
    """
    user = require(user_id)
    changes = {
        key: value
        for key, value in fields.items()
        if key in PROFILE_FIELDS and value not in (None, "")
    }

    if "name" in changes:
        name = changes["name"]
        if not isinstance(name, str) or not name.strip():
            raise RsvpmanError("INVALID_NAME")
        changes["name"] = name.strip()

    for key in ("email", "preferred_language", "profile_pic"):
        if key in changes and not isinstance(changes[key], str):
            raise RsvpmanError("INVALID_FIELD", f"{key} must be a string", field=key)

    if "gender" in changes and changes["gender"] not in Gender.values:
        raise RsvpmanError(
            "INVALID_FIELD", "Unknown gender", field="gender", allowed=list(Gender.values)
        )

    dob = changes.get("date_of_birth")
    if isinstance(dob, str):
        try:
            changes["date_of_birth"] = date.fromisoformat(dob)
        except ValueError:
            raise RsvpmanError(
                "INVALID_FIELD", "date_of_birth must be YYYY-MM-DD", field="date_of_birth"
            ) from None
    elif dob is not None and not isinstance(dob, date):
        raise RsvpmanError(
            "INVALID_FIELD", "date_of_birth must be a date", field="date_of_birth"
        )

    if not changes:
        return user
    for key, value in changes.items():
        setattr(user, key, value)
    user.save(update_fields=[*changes, "updated_at"])
    logger.info("Updated profile of user %s (%s)", user.pk, ", ".join(changes))
    return user
