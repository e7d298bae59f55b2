"""
Django RSVPman - Guest & RSVP management.

Usage:
    from rsvpman import RsvpService
    from rsvpman.gates import Gates
    from rsvpman.exceptions import RsvpmanError

    result = RsvpService.submit_rsvp(group_id, payload)
    if not result.success:
        handle(result.error_code)

    # Reconcile anonymous RSVPs into a verified account
    RsvpService.reconcile(user_id, "+15550001111")
"""


def __getattr__(name):
    if name == "RsvpService":
        from rsvpman.service import RsvpService

        return RsvpService
    if name == "ServiceResult":
        from rsvpman.service import ServiceResult

        return ServiceResult
    if name == "RsvpmanError":
        from rsvpman.exceptions import RsvpmanError

        return RsvpmanError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["RsvpService", "ServiceResult", "RsvpmanError"]
__version__ = "0.1.0"
