from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone


class Quotation(models.Model):
    """Priced offer sent to a customer, usually generated from an inquiry"""
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('ready', 'Quote Ready'),
        ('sent', 'Sent'),
        ('accepted', 'Accepted'),
        ('rejected', 'Rejected'),
        ('expired', 'Expired'),
    ]

    quotation_number = models.CharField(max_length=100, unique=True)
    quotation_date = models.DateField(default=timezone.localdate)
    validity_date = models.DateField()
    customer_name = models.CharField(max_length=255)
    customer_address = models.TextField(blank=True)
    customer_email = models.CharField(max_length=255, blank=True)
    customer_phone = models.CharField(max_length=50, blank=True)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    currency = models.CharField(max_length=10, default='AED')
    vat_percent = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('5.00'))
    terms = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    pdf_path = models.CharField(max_length=500, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    inquiry = models.ForeignKey('inquiries.CustomerInquiry', on_delete=models.SET_NULL, null=True, blank=True, related_name='quotations')
    purchase_order = models.ForeignKey('orders.PurchaseOrder', on_delete=models.SET_NULL, null=True, blank=True, related_name='quotations')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='quotations')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.quotation_number

    def days_until_validity(self, today=None):
        today = today or timezone.localdate()
        return (self.validity_date - today).days

    def is_expired(self, today=None):
        return self.days_until_validity(today) < 0

    def is_expiring_soon(self, today=None):
        days = self.days_until_validity(today)
        return 0 <= days <= settings.PO_PROCESSOR['EXPIRY_ALERT_DAYS']

    @property
    def display_status(self):
        """'pending' while any item still awaits a price"""
        if any(item.status == 'pending' for item in self.items.all()):
            return 'pending'
        return self.status

    class Meta:
        db_table = 'quotations'
        ordering = ['-quotation_date', '-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_quotation_status'),
            models.Index(fields=['validity_date'], name='idx_quotation_validity'),
            models.Index(fields=['customer_name'], name='idx_quotation_customer'),
        ]


class QuotationItem(models.Model):
    """Quotation line item"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('ready', 'Ready'),
    ]

    quotation = models.ForeignKey(Quotation, on_delete=models.CASCADE, related_name='items')
    item_name = models.CharField(max_length=255)
    item_code = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    quantity = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('1.00'))
    unit = models.CharField(max_length=20, default='EA')
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    manufacturer_part = models.CharField(max_length=255, blank=True)
    is_priced = models.BooleanField(default=False)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')

    def __str__(self):
        return self.item_name

    class Meta:
        db_table = 'quotation_items'
        ordering = ['id']
        indexes = [
            models.Index(fields=['item_code'], name='idx_quoteitem_code'),
        ]
