"""
Periodically trigger the Shopify resync sweep.

Usage:
    python3 manage.py run_shopify_sync_scheduler

    # Single sweep, executed in this process instead of on a dramatiq worker
    python3 manage.py run_shopify_sync_scheduler --once --inline

    # Custom interval (seconds)
    python3 manage.py run_shopify_sync_scheduler --interval 600
"""

import logging
import time

from django.core.management.base import BaseCommand

from shopify_sync.conf import get_setting
from shopify_sync.scheduler import run_sync_sweep

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Trigger the scheduled Shopify resync for all active shops"

    def add_arguments(self, parser):
        parser.add_argument(
            "--interval",
            type=int,
            default=None,
            help="Seconds between sweeps (default: SHOPIFY_SYNC_INTERVAL_SECONDS).",
        )
        parser.add_argument(
            "--once",
            action="store_true",
            help="Trigger a single sweep and exit.",
        )
        parser.add_argument(
            "--inline",
            action="store_true",
            help="Run the sweep in this process instead of enqueueing it.",
        )

    def handle(self, *args, **options):
        if not get_setting("SHOPIFY_SYNC_ENABLED"):
            print("Sync scheduler disabled (SHOPIFY_SYNC_ENABLED=False)")
            return

        interval = options["interval"] or get_setting("SHOPIFY_SYNC_INTERVAL_SECONDS")
        if options["once"]:
            self._tick(options["inline"])
            return

        print(f"Starting sync scheduler, every {interval}s")
        while True:
            started = time.monotonic()
            try:
                self._tick(options["inline"])
            except Exception:
                # Keep the timer alive; the next tick retries.
                logger.exception("Scheduled sync tick failed")
            time.sleep(max(0, interval - (time.monotonic() - started)))

    def _tick(self, inline):
        if inline:
            outcomes = run_sync_sweep()
            print(f"Sweep finished: {outcomes}")
            return

        # Imported lazily so --inline works without a configured broker.
        from shopify_sync.tasks import sync_active_shops

        sync_active_shops.send()
        print("Enqueued scheduled sync")
