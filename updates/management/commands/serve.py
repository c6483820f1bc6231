import logging

from django.conf import settings
from django.core.management import call_command
from django.core.management.base import BaseCommand, CommandError
from django.db import OperationalError, connection

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Verify the database connection, then start the HTTP server on the configured PORT"

    def add_arguments(self, parser):
        parser.add_argument(
            "--addr",
            default="0.0.0.0",
            help="Address to bind (default: 0.0.0.0)",
        )
        parser.add_argument(
            "--port",
            type=int,
            default=None,
            help="Port to listen on (default: the PORT setting)",
        )
        parser.add_argument(
            "--noreload",
            action="store_true",
            help="Disable the auto-reloader",
        )

    def handle(self, *args, **options):
        # The server never starts without a reachable database.
        try:
            connection.ensure_connection()
        except OperationalError as e:
            logger.error(f"Database connection error: {e}")
            raise CommandError(f"Database connection error: {e}")

        logger.info(f"Connected to database ({connection.vendor})")

        port = options["port"] or getattr(settings, "PORT", 5000)
        addrport = f"{options['addr']}:{port}"
        self.stdout.write(self.style.SUCCESS(f"Server is running on port {port}"))

        call_command("runserver", addrport, use_reloader=not options["noreload"])
