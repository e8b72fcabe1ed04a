from django.contrib import admin

from .models import CustomerInquiry, InquiryItem


class InquiryItemInline(admin.TabularInline):
    model = InquiryItem
    extra = 0


@admin.register(CustomerInquiry)
class CustomerInquiryAdmin(admin.ModelAdmin):
    list_display = ['inquiry_number', 'customer_name', 'inquiry_date', 'status', 'created_at']
    list_filter = ['status', 'inquiry_date']
    search_fields = ['inquiry_number', 'customer_name', 'sender_email']
    raw_id_fields = ['purchase_order']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [InquiryItemInline]
