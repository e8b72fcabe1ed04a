from decimal import Decimal

from django.db import models


class InventoryMaterial(models.Model):
    """Stocked material compared against its predicted monthly demand"""
    material_name = models.CharField(max_length=255)
    material_code = models.CharField(max_length=100, unique=True)
    current_stock = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    predicted_demand = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.material_name} ({self.material_code})"

    @property
    def delta(self):
        return self.current_stock - self.predicted_demand

    @property
    def stock_status(self):
        return 'Understock' if self.delta < 0 else 'Surplus'

    class Meta:
        db_table = 'inventory_materials'
        ordering = ['material_code']
        indexes = [
            models.Index(fields=['material_name'], name='idx_material_name'),
        ]
