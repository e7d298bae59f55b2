"""RSVPman exceptions."""


class ErrorKind:
    """Error taxonomy shared by services, the facade and the views."""

    NOT_FOUND = "not_found"
    INVALID_ARGUMENT = "invalid_argument"
    EXPIRED = "expired"
    ALREADY_EXISTS = "already_exists"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class RsvpmanError(Exception):
    """
    Structured exception for guest and RSVP operations.

    Usage:
        try:
            submission = guests.submit_rsvp(group_id, payload)
        except RsvpmanError as e:
            if e.kind == ErrorKind.EXPIRED:
                handle_closed_window()
    """

    _default_messages = {
        "EVENT_NOT_FOUND": "Event not found",
        "GROUP_NOT_FOUND": "Guest group not found",
        "USER_NOT_FOUND": "User not found",
        "GUEST_NOT_FOUND": "No RSVP found",
        "NOT_MEMBER": "User is not a member of this group",
        "GROUP_NOT_ATTACHED": "Group is not associated with this event",
        "INVALID_RSVP": "Invalid RSVP value",
        "INVALID_COUNT": "Guest count must be at least 1",
        "MISSING_CONTACT": "Name and phone number are required",
        "INVALID_PHONE": "Invalid phone number",
        "INVALID_SCHEDULE": "Event must end after it starts",
        "INVALID_NAME": "Name is required",
        "INVALID_FIELD": "Invalid field value",
        "OTP_REJECTED": "Invalid OTP",
        "PHONE_MISMATCH": "Phone number does not belong to this user",
        "RSVP_WINDOW_CLOSED": "Cannot submit RSVP - event has already started",
        "ALREADY_MEMBER": "User is already a member of this group",
        "USER_EXISTS": "An account already exists for this phone number",
        "DUPLICATE_INVITE": "Invite already exists for this phone number and event",
        "PHONE_NOT_VERIFIED": "Phone number has not been verified",
        "NOT_VERIFIED": "User has not completed verification",
        "INVALID_TOKEN": "Unauthorized",
        "NOT_HOST": "Only hosts and co-hosts can perform this action",
        "INVITE_LINK_INACTIVE": "This invite link is no longer active",
        "CONFLICT": "Concurrent update conflict, please retry",
        "BACKEND_NOT_CONFIGURED": "Required backend is not configured",
    }

    _kinds = {
        "EVENT_NOT_FOUND": ErrorKind.NOT_FOUND,
        "GROUP_NOT_FOUND": ErrorKind.NOT_FOUND,
        "USER_NOT_FOUND": ErrorKind.NOT_FOUND,
        "GUEST_NOT_FOUND": ErrorKind.NOT_FOUND,
        "NOT_MEMBER": ErrorKind.NOT_FOUND,
        "GROUP_NOT_ATTACHED": ErrorKind.INVALID_ARGUMENT,
        "INVALID_RSVP": ErrorKind.INVALID_ARGUMENT,
        "INVALID_COUNT": ErrorKind.INVALID_ARGUMENT,
        "MISSING_CONTACT": ErrorKind.INVALID_ARGUMENT,
        "INVALID_PHONE": ErrorKind.INVALID_ARGUMENT,
        "INVALID_SCHEDULE": ErrorKind.INVALID_ARGUMENT,
        "INVALID_NAME": ErrorKind.INVALID_ARGUMENT,
        "INVALID_FIELD": ErrorKind.INVALID_ARGUMENT,
        "OTP_REJECTED": ErrorKind.INVALID_ARGUMENT,
        "PHONE_MISMATCH": ErrorKind.INVALID_ARGUMENT,
        "RSVP_WINDOW_CLOSED": ErrorKind.EXPIRED,
        "ALREADY_MEMBER": ErrorKind.ALREADY_EXISTS,
        "USER_EXISTS": ErrorKind.ALREADY_EXISTS,
        "DUPLICATE_INVITE": ErrorKind.ALREADY_EXISTS,
        "PHONE_NOT_VERIFIED": ErrorKind.FORBIDDEN,
        "NOT_VERIFIED": ErrorKind.FORBIDDEN,
        "INVALID_TOKEN": ErrorKind.UNAUTHORIZED,
        "NOT_HOST": ErrorKind.FORBIDDEN,
        "INVITE_LINK_INACTIVE": ErrorKind.EXPIRED,
        "CONFLICT": ErrorKind.CONFLICT,
        "BACKEND_NOT_CONFIGURED": ErrorKind.INTERNAL,
    }

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.kind = self._kinds.get(code, ErrorKind.INTERNAL)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        return {
            "code": self.code,
            "kind": self.kind,
            "message": self.message,
            "data": self.data,
        }
