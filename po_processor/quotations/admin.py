from django.contrib import admin

from .models import Quotation, QuotationItem


class QuotationItemInline(admin.TabularInline):
    model = QuotationItem
    extra = 0


@admin.register(Quotation)
class QuotationAdmin(admin.ModelAdmin):
    list_display = ['quotation_number', 'customer_name', 'quotation_date', 'validity_date', 'total_amount', 'currency', 'status']
    list_filter = ['status', 'currency', 'quotation_date']
    search_fields = ['quotation_number', 'customer_name', 'items__item_code']
    raw_id_fields = ['inquiry', 'purchase_order']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [QuotationItemInline]
