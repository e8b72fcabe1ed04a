from django.contrib import admin

from .models import DeliveryDocument, DeliveryItem


class DeliveryItemInline(admin.TabularInline):
    model = DeliveryItem
    extra = 0


@admin.register(DeliveryDocument)
class DeliveryDocumentAdmin(admin.ModelAdmin):
    list_display = ['document_number', 'document_type', 'customer_name', 'document_date', 'total_amount', 'status']
    list_filter = ['status', 'document_type', 'document_date']
    search_fields = ['document_number', 'customer_name', 'customer_trn']
    raw_id_fields = ['purchase_order', 'supplier_order']
    readonly_fields = ['subtotal', 'vat_amount', 'total_amount', 'created_at', 'updated_at']
    inlines = [DeliveryItemInline]
