from django.contrib import admin

from .models import SupplierOrder, SupplierOrderItem


class SupplierOrderItemInline(admin.TabularInline):
    model = SupplierOrderItem
    extra = 0


@admin.register(SupplierOrder)
class SupplierOrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'supplier_name', 'order_date', 'expected_delivery_date', 'total_amount', 'status']
    list_filter = ['status', 'order_date']
    search_fields = ['order_number', 'supplier_name']
    raw_id_fields = ['purchase_order']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [SupplierOrderItemInline]
