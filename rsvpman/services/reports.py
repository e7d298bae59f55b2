"""Reporting service - read-side aggregation for hosts.

Access control is the caller's job: routes check is_host_or_cohost() (or
Gates.host_access) before serving any of these reads.
"""

from dataclasses import dataclass, field

from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce, Lower

from rsvpman.models import GuestRecord, PREFERENCE_FIELDS, Rsvp
from rsvpman.services import events
from rsvpman.services.guests import require_group

is_host_or_cohost = events.is_host_or_cohost


@dataclass
class SummaryRow:
    rsvp: str
    food: str
    alcohol: str
    accommodation: str
    records: int
    guests: int


@dataclass
class RsvpSummary:
    event_id: str
    rows: list[SummaryRow] = field(default_factory=list)
    total_invited: int = 0
    total_guests: int = 0
    total_confirmed: int = 0

    def by_rsvp(self) -> dict[str, int]:
        """Record counts per RSVP value."""
        totals = {}
        for row in self.rows:
            totals[row.rsvp] = totals.get(row.rsvp, 0) + row.records
        return totals


@dataclass
class GuestList:
    linked: list[GuestRecord] = field(default_factory=list)
    unlinked: list[GuestRecord] = field(default_factory=list)

    def __len__(self):
        return len(self.linked) + len(self.unlinked)


def rsvp_summary(event_id) -> RsvpSummary:
    """
    Aggregate an event's records by (rsvp, food, alcohol, accommodation).

    total_invited counts records, total_guests sums party sizes and
    total_confirmed sums party sizes of accepted records.
    """
    event = events.require(event_id)
    records = GuestRecord.objects.filter(event=event)

    grouped = (
        records.values("rsvp", *PREFERENCE_FIELDS)
        .annotate(records=Count("id"), guests=Sum("count"))
        .order_by("rsvp", *PREFERENCE_FIELDS)
    )
    totals = records.aggregate(
        total_invited=Count("id"),
        total_guests=Coalesce(Sum("count"), 0),
        total_confirmed=Coalesce(Sum("count", filter=Q(rsvp=Rsvp.ACCEPTED)), 0),
    )

    return RsvpSummary(
        event_id=str(event.pk),
        rows=[SummaryRow(**row) for row in grouped],
        **totals,
    )


def guest_list(
    event_id,
    rsvp: str | None = None,
    food: str | None = None,
    alcohol: str | None = None,
    accommodation: str | None = None,
    group_id=None,
    include_unlinked: bool = True,
) -> GuestList:
    """
    Event guests split into linked and unlinked, ordered by group then name.

    Every filter is optional; None means "any". An unknown or malformed
    group_id raises GROUP_NOT_FOUND.
    """
    event = events.require(event_id)
    if group_id is not None:
        group_id = require_group(group_id).pk
    filters = {
        key: value
        for key, value in {
            "rsvp": rsvp,
            "food": food,
            "alcohol": alcohol,
            "accommodation": accommodation,
            "group_id": group_id,
        }.items()
        if value is not None
    }
    records = GuestRecord.objects.filter(event=event, **filters).select_related(
        "user", "group"
    )

    linked = records.linked().order_by(
        Lower("group__name").asc(nulls_last=True), Lower("user__name"), "created_at"
    )
    result = GuestList(linked=list(linked))
    if include_unlinked:
        unlinked = records.unlinked().order_by(
            Lower("group__name").asc(nulls_last=True), Lower("name"), "created_at"
        )
        result.unlinked = list(unlinked)
    return result
