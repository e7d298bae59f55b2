"""
Guest identity: who a GuestRecord belongs to.

A GuestRecord is either Linked to a User account or Unlinked, identified only
by the raw contact fields captured from an anonymous web submission.
The services write the identity columns only through
GuestRecord.set_identity() (bulk inserts included) and read them through
GuestRecord.identity. The rsvpman_guest_identity_xor check constraint
rejects a row that is "both" or "neither".
"""

from dataclasses import dataclass
from typing import Union

from rsvpman.utils import normalize_email, normalize_phone


@dataclass(frozen=True)
class Linked:
    """Identity owned by a User account."""

    user_id: object

    @property
    def is_linked(self) -> bool:
        return True


@dataclass(frozen=True)
class Unlinked:
    """Ad-hoc identity from an anonymous submission."""

    name: str
    phone: str
    email: str = ""

    def __post_init__(self):
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "name", (self.name or "").strip())
        object.__setattr__(self, "phone", normalize_phone(self.phone))
        object.__setattr__(self, "email", normalize_email(self.email))
        if not self.name or not self.phone:
            raise ValueError("Unlinked identity requires name and phone")

    @property
    def is_linked(self) -> bool:
        return False


GuestIdentity = Union[Linked, Unlinked]
