# carts/management/commands/purge_guest_carts.py

from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from carts.models import Cart


class Command(BaseCommand):
    help = "Delete guest carts that have not been touched for GUEST_CART_TTL_DAYS days."

    def add_arguments(self, parser):
        parser.add_argument(
            "--days",
            type=int,
            default=None,
            help="Override GUEST_CART_TTL_DAYS.",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be deleted without deleting.",
        )

    def handle(self, *args, **options):
        days = options.get("days")
        if days is None:
            days = int(getattr(settings, "GUEST_CART_TTL_DAYS", 30))
        if days < 1:
            raise CommandError("--days must be at least 1")

        cutoff = timezone.now() - timedelta(days=days)
        stale = Cart.objects.filter(cart_type=Cart.TYPE_GUEST, updated_at__lt=cutoff)
        count = stale.count()

        if options.get("dry_run"):
            self.stdout.write(f"DRY RUN: {count} guest cart(s) older than {days} day(s).")
            return

        stale.delete()
        self.stdout.write(self.style.SUCCESS(f"Deleted {count} guest cart(s) older than {days} day(s)."))
