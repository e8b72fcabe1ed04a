from django.contrib import admin

from .models import InventoryMaterial


@admin.register(InventoryMaterial)
class InventoryMaterialAdmin(admin.ModelAdmin):
    list_display = ['material_code', 'material_name', 'current_stock', 'predicted_demand', 'updated_at']
    search_fields = ['material_code', 'material_name']
    ordering = ['material_code']
