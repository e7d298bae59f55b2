"""Development OTP backend."""

import logging

from django.conf import settings

logger = logging.getLogger(__name__)


class StaticOTPBackend:
    """
    Accepts a single fixed code. For local development and tests only.

    Settings:
        RSVPMAN_STATIC_OTP_CODE - accepted code (default "000000").
    """

    def __init__(self):
        self.code = getattr(settings, "RSVPMAN_STATIC_OTP_CODE", "000000")

    def send(self, phone: str) -> str:
        logger.warning("StaticOTPBackend: no SMS sent to %s (development backend)", phone)
        return "pending"

    def verify(self, phone: str, code: str) -> bool:
        return bool(code) and code == self.code
