"""
Management command to add the standard inventory materials
"""
from decimal import Decimal

from django.core.management.base import BaseCommand

from po_processor.inventory.models import InventoryMaterial

MATERIALS = [
    ('Water Tap', 'WT-001', Decimal('1280'), Decimal('1870')),
    ('V-Belt', 'VB-002', Decimal('450'), Decimal('300')),
    ('Gloves', 'GL-003', Decimal('320'), Decimal('280')),
    ('Lubricants', 'LB-004', Decimal('95'), Decimal('120')),
]


class Command(BaseCommand):
    help = "Adds the standard inventory materials with their stock and predicted demand"

    def add_arguments(self, parser):
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Overwrite stock and demand of materials that already exist',
        )

    def handle(self, *args, **options):
        reset = options['reset']
        created_count = 0
        updated_count = 0

        for name, code, stock, demand in MATERIALS:
            material, created = InventoryMaterial.objects.get_or_create(
                material_code=code,
                defaults={'material_name': name, 'current_stock': stock, 'predicted_demand': demand},
            )
            if created:
                created_count += 1
                self.stdout.write(f"  Created {code} {name}")
            elif reset:
                material.material_name = name
                material.current_stock = stock
                material.predicted_demand = demand
                material.save()
                updated_count += 1
                self.stdout.write(f"  Reset {code} {name}")

        self.stdout.write(self.style.SUCCESS(
            f"Inventory materials: {created_count} created, {updated_count} reset"
        ))
