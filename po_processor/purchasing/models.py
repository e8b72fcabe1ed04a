from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone


class SupplierOrder(models.Model):
    """Order placed with a supplier to fulfil a customer purchase order"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('confirmed', 'Confirmed'),
        ('in_transit', 'In Transit'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    ]

    order_number = models.CharField(max_length=100, unique=True)
    order_date = models.DateField(default=timezone.localdate)
    expected_delivery_date = models.DateField(null=True, blank=True)
    supplier_name = models.CharField(max_length=255)
    supplier_address = models.TextField(blank=True)
    supplier_email = models.CharField(max_length=255, blank=True)
    supplier_phone = models.CharField(max_length=50, blank=True)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    currency = models.CharField(max_length=10, default='AED')
    terms = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    purchase_order = models.ForeignKey('orders.PurchaseOrder', on_delete=models.SET_NULL, null=True, blank=True, related_name='supplier_orders')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='supplier_orders')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.order_number

    @property
    def delivery_document(self):
        """Most recent delivery document raised against this order"""
        documents = list(self.delivery_documents.all())
        if not documents:
            return None
        return max(documents, key=lambda document: (document.created_at, document.id))

    def get_subtotal(self):
        return sum((item.total for item in self.items.all()), Decimal('0.00'))

    class Meta:
        db_table = 'supplier_orders'
        ordering = ['-order_date', '-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_suporder_status'),
            models.Index(fields=['supplier_name'], name='idx_suporder_supplier'),
            models.Index(fields=['-order_date', '-created_at'], name='idx_suporder_date_created'),
        ]


class SupplierOrderItem(models.Model):
    """Supplier order line item"""
    supplier_order = models.ForeignKey(SupplierOrder, on_delete=models.CASCADE, related_name='items')
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
        db_table = 'supplier_order_items'
        ordering = ['id']
