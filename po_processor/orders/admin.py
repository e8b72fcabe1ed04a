from django.contrib import admin

from .models import LineItem, PurchaseOrder


class LineItemInline(admin.TabularInline):
    model = LineItem
    extra = 0


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['po_number', 'customer_name', 'po_date', 'expiry_date', 'total_amount', 'currency', 'status']
    list_filter = ['status', 'currency', 'po_date']
    search_fields = ['po_number', 'customer_name', 'quotation_reference']
    readonly_fields = ['status', 'created_at', 'updated_at']
    inlines = [LineItemInline]
