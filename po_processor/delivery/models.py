from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone


class DeliveryDocument(models.Model):
    """Commercial invoice and/or delivery order issued to a customer"""
    TYPE_CHOICES = [
        ('commercial_invoice', 'Commercial Invoice'),
        ('delivery_order', 'Delivery Order'),
        ('both', 'Both'),
    ]
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('generated', 'Generated'),
        ('sent', 'Sent'),
    ]

    document_number = models.CharField(max_length=100, unique=True)
    document_type = models.CharField(max_length=30, choices=TYPE_CHOICES, default='both')
    document_date = models.DateField(default=timezone.localdate)
    customer_name = models.CharField(max_length=255)
    customer_address = models.TextField(blank=True)
    customer_email = models.CharField(max_length=255, blank=True)
    customer_phone = models.CharField(max_length=50, blank=True)
    customer_trn = models.CharField(max_length=50, blank=True, help_text="Customer tax registration number")
    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    vat_percent = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'))
    vat_amount = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    currency = models.CharField(max_length=10, default='AED')
    terms = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    pdf_path = models.CharField(max_length=500, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    purchase_order = models.ForeignKey('orders.PurchaseOrder', on_delete=models.SET_NULL, null=True, blank=True, related_name='delivery_documents')
    supplier_order = models.ForeignKey('purchasing.SupplierOrder', on_delete=models.SET_NULL, null=True, blank=True, related_name='delivery_documents')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='delivery_documents')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.document_number

    class Meta:
        db_table = 'delivery_documents'
        ordering = ['-document_date', '-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_delivery_status'),
            models.Index(fields=['document_type'], name='idx_delivery_type'),
            models.Index(fields=['customer_name'], name='idx_delivery_customer'),
        ]


class DeliveryItem(models.Model):
    """Delivery document line item"""
    document = models.ForeignKey(DeliveryDocument, on_delete=models.CASCADE, related_name='items')
    item_name = models.CharField(max_length=255)
    item_code = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    quantity = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('1.00'))
    unit = models.CharField(max_length=20, default='pcs')
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))

    def __str__(self):
        return self.item_name

    class Meta:
        db_table = 'delivery_items'
        ordering = ['id']
