"""
Management command to persist the expiry-derived status of purchase orders
"""
from django.core.management.base import BaseCommand

from po_processor.orders.services import refresh_statuses


class Command(BaseCommand):
    help = "Updates stored purchase order statuses from their expiry dates"

    def handle(self, *args, **options):
        changed = refresh_statuses()
        self.stdout.write(self.style.SUCCESS(f"Updated {changed} purchase order status(es)"))
