"""Collaborator backends, loaded from RSVPMAN settings."""

from django.utils.module_loading import import_string

from rsvpman.conf import rsvpman_settings
from rsvpman.exceptions import RsvpmanError


def get_otp_backend():
    """Instantiate configured OTP_BACKEND."""
    backend_path = rsvpman_settings.OTP_BACKEND
    if not backend_path:
        raise RsvpmanError("BACKEND_NOT_CONFIGURED", backend="OTP_BACKEND")
    return import_string(backend_path)()


def get_auth_verifier():
    """Instantiate configured AUTH_VERIFIER."""
    backend_path = rsvpman_settings.AUTH_VERIFIER
    if not backend_path:
        raise RsvpmanError("BACKEND_NOT_CONFIGURED", backend="AUTH_VERIFIER")
    return import_string(backend_path)()
