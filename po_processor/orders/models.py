from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone


class PurchaseOrder(models.Model):
    """Customer purchase order tracked against its expiry date"""
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('expiring_soon', 'Expiring Soon'),
        ('expired', 'Expired'),
    ]

    po_number = models.CharField(max_length=100, unique=True)
    po_date = models.DateField()
    expiry_date = models.DateField()
    customer_name = models.CharField(max_length=255)
    customer_address = models.TextField(blank=True)
    customer_email = models.CharField(max_length=255, blank=True)
    customer_phone = models.CharField(max_length=50, blank=True)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    currency = models.CharField(max_length=10, default='AED')
    terms = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    pdf_path = models.CharField(max_length=500, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    quotation_reference = models.CharField(max_length=100, blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='purchase_orders')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.po_number

    def days_until_expiry(self, today=None):
        today = today or timezone.localdate()
        return (self.expiry_date - today).days

    def is_expired(self, today=None):
        return self.days_until_expiry(today) < 0

    def is_expiring_soon(self, today=None):
        """Expires within the alert window but has not expired yet"""
        days = self.days_until_expiry(today)
        return 0 <= days <= settings.PO_PROCESSOR['EXPIRY_ALERT_DAYS']

    def effective_status(self, today=None):
        """Status derived from the expiry date"""
        if self.is_expired(today):
            return 'expired'
        if self.is_expiring_soon(today):
            return 'expiring_soon'
        return 'active'

    def save(self, *args, **kwargs):
        self.status = self.effective_status()
        super().save(*args, **kwargs)

    def get_subtotal(self):
        return sum((item.total for item in self.items.all()), Decimal('0.00'))

    class Meta:
        db_table = 'purchase_orders'
        ordering = ['-po_date', '-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_po_status'),
            models.Index(fields=['expiry_date'], name='idx_po_expiry'),
            models.Index(fields=['-po_date', '-created_at'], name='idx_po_date_created'),
            models.Index(fields=['customer_name'], name='idx_po_customer'),
        ]


class LineItem(models.Model):
    """Purchase order line item"""
    purchase_order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name='items')
    item_name = models.CharField(max_length=255)
    item_code = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    quantity = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('1.00'))
    unit = models.CharField(max_length=20, default='pcs')
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))

    def __str__(self):
        return self.item_name

    def get_line_total(self):
        return self.quantity * self.unit_price

    class Meta:
        db_table = 'po_line_items'
        ordering = ['id']
        indexes = [
            models.Index(fields=['item_code'], name='idx_poitem_code'),
        ]
