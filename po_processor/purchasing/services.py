"""Supplier order numbering, status transitions and creation from purchase orders"""
import logging

from django.conf import settings
from django.db import transaction
from rest_framework.exceptions import ValidationError

from po_processor.core.currency import to_money
from po_processor.core.numbering import next_document_number

from .models import SupplierOrder, SupplierOrderItem

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    'pending': ('confirmed', 'cancelled'),
    'confirmed': ('in_transit', 'cancelled'),
    'in_transit': ('delivered',),
}


def next_supplier_order_number(today=None):
    return next_document_number('SO', SupplierOrder, 'order_number', today)


def can_transition(current_status, new_status):
    return new_status in ALLOWED_TRANSITIONS.get(current_status, ())


def transition(order, new_status):
    """Move a supplier order along its lifecycle; returns the previous status"""
    if not can_transition(order.status, new_status):
        raise ValidationError({
            'error': f"Cannot change supplier order status from '{order.status}' to '{new_status}'."
        })
    old_status = order.status
    order.status = new_status
    order.save(update_fields=['status', 'updated_at'])
    logger.info(f"Supplier order {order.order_number} status {old_status} -> {new_status}")
    return old_status


def recalculate_total(order):
    order.total_amount = to_money(order.get_subtotal())
    order.save(update_fields=['total_amount', 'updated_at'])
    return order.total_amount


def create_from_purchase_order(purchase_order, supplier, item_codes=None,
                               expected_delivery_date=None, notes='', user=None):
    """
    Raise a supplier order for a customer purchase order.

    ``supplier`` holds name, address, email and phone. When ``item_codes`` is
    given only the matching line items (case-insensitive) are copied.
    """
    line_items = list(purchase_order.items.all())
    if item_codes:
        wanted = {code.strip().upper() for code in item_codes if code and code.strip()}
        line_items = [item for item in line_items if item.item_code.strip().upper() in wanted]
    if not line_items:
        raise ValidationError({'error': 'No purchase order items selected for the supplier order.'})

    with transaction.atomic():
        order = SupplierOrder.objects.create(
            order_number=next_supplier_order_number(),
            expected_delivery_date=expected_delivery_date,
            supplier_name=supplier['name'],
            supplier_address=supplier.get('address', ''),
            supplier_email=supplier.get('email', ''),
            supplier_phone=supplier.get('phone', ''),
            currency=purchase_order.currency or settings.PO_PROCESSOR['DEFAULT_CURRENCY'],
            notes=notes or '',
            purchase_order=purchase_order,
            created_by=user,
        )
        SupplierOrderItem.objects.bulk_create([
            SupplierOrderItem(
                supplier_order=order,
                item_name=item.item_name,
                item_code=item.item_code,
                description=item.description,
                quantity=item.quantity,
                unit=item.unit,
                unit_price=item.unit_price,
                total=item.total,
            )
            for item in line_items
        ])
        recalculate_total(order)

    logger.info(
        f"Created supplier order {order.order_number} for purchase order "
        f"{purchase_order.po_number} with {len(line_items)} item(s)"
    )
    return order
