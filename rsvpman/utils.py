"""Shared helpers."""

import re

_PHONE_NOISE = re.compile(r"[\s\-().]")


def normalize_phone(value: str | None) -> str:
    """
    Normalize a phone number to its identity-key form.

    Separators (spaces, dashes, dots, parentheses) are removed and a single
    leading "+" is kept. Anything else is returned as-is so that Gates can
    reject it; an empty or non-string value returns "".

        >>> normalize_phone(" +1 (555) 010-2030 ")
        '+15550102030'
    """
    if not value or not isinstance(value, str):
        return ""
    phone = _PHONE_NOISE.sub("", value.strip())
    return phone


def normalize_email(value: str | None) -> str:
    """Lowercase and strip an email (empty string when missing)."""
    if not value or not isinstance(value, str):
        return ""
    return value.strip().lower()


def get_or_none(queryset, **lookup):
    """
    queryset.get(**lookup), or None when missing.

    Malformed keys (e.g. a non-UUID string for a UUID pk) count as missing.
    """
    from django.core.exceptions import ObjectDoesNotExist, ValidationError

    try:
        return queryset.get(**lookup)
    except (ObjectDoesNotExist, ValidationError, ValueError):
        return None
