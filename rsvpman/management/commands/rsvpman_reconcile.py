"""Management command to link pending web RSVPs into verified accounts."""

from django.core.management.base import BaseCommand

from rsvpman.services import reconciliation


class Command(BaseCommand):
    help = "Link unlinked RSVPs to every verified user owning their phone"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Only list users with pending RSVPs",
        )

    def handle(self, *args, **options):
        if options["dry_run"]:
            pending = reconciliation.pending_users()
            for user in pending:
                self.stdout.write(f"{user.pk} {user.phone_masked}")
            self.stdout.write(f"{len(pending)} user(s) with pending RSVPs.")
            return

        linked = discarded = 0
        for user, result in reconciliation.reconcile_all():
            linked += result.linked_count
            discarded += result.discarded_count
        self.stdout.write(
            self.style.SUCCESS(
                f"Linked {linked} RSVP(s), discarded {discarded} duplicate(s)."
            )
        )
