from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone


class CustomerInquiry(models.Model):
    """Customer request for quotation (RFQ)"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('reviewed', 'Reviewed'),
        ('quoted', 'Quoted'),
        ('partially_quoted', 'Partially Quoted'),
        ('converted_to_po', 'Converted to PO'),
    ]

    inquiry_number = models.CharField(max_length=100, unique=True)
    inquiry_date = models.DateField(default=timezone.localdate)
    customer_name = models.CharField(max_length=255)
    customer_address = models.TextField(blank=True)
    customer_email = models.CharField(max_length=255, blank=True)
    customer_phone = models.CharField(max_length=50, blank=True)
    sender_email = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)
    pdf_path = models.CharField(max_length=500, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    purchase_order = models.ForeignKey('orders.PurchaseOrder', on_delete=models.SET_NULL, null=True, blank=True, related_name='inquiries')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='inquiries')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.inquiry_number

    @property
    def quotation(self):
        """Most recent quotation generated from this inquiry"""
        quotations = list(self.quotations.all())
        if not quotations:
            return None
        return max(quotations, key=lambda quotation: (quotation.created_at, quotation.id))

    def item_counts(self):
        statuses = [item.status for item in self.items.all()]
        quoted = statuses.count('quoted')
        return quoted, len(statuses) - quoted

    class Meta:
        db_table = 'customer_inquiries'
        verbose_name_plural = 'customer inquiries'
        ordering = ['-inquiry_date', '-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_inquiry_status'),
            models.Index(fields=['customer_name'], name='idx_inquiry_customer'),
            models.Index(fields=['-inquiry_date', '-created_at'], name='idx_inquiry_date_created'),
        ]


class InquiryItem(models.Model):
    """Item requested in an inquiry"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('quoted', 'Quoted'),
    ]

    inquiry = models.ForeignKey(CustomerInquiry, on_delete=models.CASCADE, related_name='items')
    item_name = models.CharField(max_length=255)
    item_code = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    quantity = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('1.00'))
    unit = models.CharField(max_length=20, default='EA')
    manufacturer_part = models.CharField(max_length=255, blank=True)
    class_code = models.CharField(max_length=100, blank=True)
    plant = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')

    def __str__(self):
        return self.item_name

    class Meta:
        db_table = 'inquiry_items'
        ordering = ['id']
