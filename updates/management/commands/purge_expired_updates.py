from django.core.management.base import BaseCommand

from updates.models import get_ttl_seconds
from updates.services import purge_expired


class Command(BaseCommand):
    help = "Delete updates older than their time-to-live (UPDATE_TTL_SECONDS)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Only report how many updates would be deleted",
        )

    def handle(self, *args, **options):
        ttl_days = get_ttl_seconds() / 86400
        count = purge_expired(dry_run=options["dry_run"])

        if options["dry_run"]:
            self.stdout.write(f"{count} updates older than {ttl_days:g} days would be deleted")
        else:
            self.stdout.write(
                self.style.SUCCESS(f"Deleted {count} updates older than {ttl_days:g} days")
            )
