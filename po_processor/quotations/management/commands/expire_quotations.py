"""
Management command to expire open quotations past their validity date
"""
from django.core.management.base import BaseCommand

from po_processor.quotations.services import expire_overdue


class Command(BaseCommand):
    help = "Marks draft, ready and sent quotations past their validity date as expired"

    def handle(self, *args, **options):
        expired = expire_overdue()
        self.stdout.write(self.style.SUCCESS(f"Expired {expired} quotation(s)"))
