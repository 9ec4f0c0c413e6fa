"""Management command to sweep expired and old QR tokens."""

from django.core.management.base import BaseCommand

from linkman.services import qr


class Command(BaseCommand):
    help = "Remove QR tokens that can no longer be redeemed"

    def add_arguments(self, parser):
        parser.add_argument(
            "--retention-days",
            type=int,
            default=None,
            help="Override QR_RETENTION_DAYS setting",
        )

    def handle(self, *args, **options):
        deleted_count = qr.cleanup(retention_days=options["retention_days"])
        self.stdout.write(
            self.style.SUCCESS(f"Deleted {deleted_count} QR tokens.")
        )
