"""
Quotation pricing and status transitions.
"""
import logging
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from po_processor.core.cache_utils import invalidate_dashboard_cache
from po_processor.core.utils import replace_items
from po_processor.inquiries.services import refresh_status as refresh_inquiry_status
from po_processor.orders.models import LineItem, PurchaseOrder

from .models import Quotation, QuotationItem
from .pricing import calculate_totals, line_total, price_for

logger = logging.getLogger(__name__)

SENDABLE_STATUSES = ('draft', 'ready')
ACCEPTABLE_STATUSES = ('sent', 'ready')
REJECTABLE_STATUSES = ('draft', 'ready', 'sent')
EXPIRABLE_STATUSES = ('draft', 'ready', 'sent')


def save_items(quotation, items_data):
    """Replace the quotation's items; an item with a positive price is ready"""
    prepared = []
    for item_data in items_data:
        item_data = dict(item_data)
        priced = (item_data.get('unit_price') or 0) > 0
        item_data['is_priced'] = priced
        item_data['status'] = 'ready' if priced else 'pending'
        prepared.append(item_data)
    return replace_items(quotation, prepared, QuotationItem, 'quotation')


def update_totals(quotation, status_from_items=True):
    """Recompute the grand total (VAT included) and, for drafts, the ready status"""
    items = list(quotation.items.all())
    quotation.total_amount = calculate_totals(items, quotation.vat_percent)['grand_total']
    if status_from_items and quotation.status in SENDABLE_STATUSES:
        quotation.status = 'ready' if items and all(item.is_priced for item in items) else 'draft'
    quotation.save(update_fields=['total_amount', 'status', 'updated_at'])
    return quotation


def mirror_to_inquiry(quotation, priced_items):
    """Mark inquiry items quoted for the quotation items that were just priced"""
    inquiry = quotation.inquiry
    if inquiry is None:
        return
    for item in priced_items:
        inquiry.items.filter(
            item_name=item.item_name,
            item_code=item.item_code,
            status='pending',
        ).update(status='quoted')
    refresh_inquiry_status(inquiry)


def price_pending_items(quotation, prices):
    """
    Price the quotation's pending items.

    Prices are keyed by item id or item name. Only pending items with a
    positive price change; the grand total is recomputed with VAT.
    Returns the list of items that were priced.
    """
    pending_items = [item for item in quotation.items.all() if item.status == 'pending']
    if not pending_items:
        raise ValidationError({'error': 'Quotation has no pending items to price.'})

    priced_items = []
    with transaction.atomic():
        for item in pending_items:
            price = price_for(prices, item)
            if price <= 0:
                continue
            item.unit_price = price
            item.total = line_total(item.quantity, price)
            item.is_priced = True
            item.status = 'ready'
            item.save(update_fields=['unit_price', 'total', 'is_priced', 'status'])
            priced_items.append(item)

        update_totals(quotation)
        mirror_to_inquiry(quotation, priced_items)

    logger.info(f"Priced {len(priced_items)} pending item(s) on quotation {quotation.quotation_number}")
    return priced_items


def _transition(quotation, new_status, allowed_from):
    if quotation.status not in allowed_from:
        raise ValidationError({
            'error': f"Cannot change quotation status from '{quotation.status}' to '{new_status}'."
        })
    old_status = quotation.status
    quotation.status = new_status
    quotation.save(update_fields=['status', 'updated_at'])
    logger.info(f"Quotation {quotation.quotation_number} status {old_status} -> {new_status}")
    return old_status


def send(quotation):
    return _transition(quotation, 'sent', SENDABLE_STATUSES)


def reject(quotation):
    return _transition(quotation, 'rejected', REJECTABLE_STATUSES)


def create_purchase_order(quotation, po_number, po_date=None, expiry_date=None, user=None):
    """Create a customer purchase order mirroring the quotation"""
    if PurchaseOrder.objects.filter(po_number=po_number).exists():
        raise ValidationError({'po_number': f"Purchase order {po_number} already exists."})

    po_date = po_date or timezone.localdate()
    if expiry_date is None:
        expiry_date = po_date + timedelta(days=settings.PO_PROCESSOR['QUOTATION_VALIDITY_DAYS'])

    purchase_order = PurchaseOrder.objects.create(
        po_number=po_number,
        po_date=po_date,
        expiry_date=expiry_date,
        customer_name=quotation.customer_name,
        customer_address=quotation.customer_address,
        customer_email=quotation.customer_email,
        customer_phone=quotation.customer_phone,
        total_amount=quotation.total_amount,
        currency=quotation.currency,
        terms=quotation.terms,
        notes=quotation.notes,
        quotation_reference=quotation.quotation_number,
        created_by=user,
    )
    LineItem.objects.bulk_create([
        LineItem(
            purchase_order=purchase_order,
            item_name=item.item_name,
            item_code=item.item_code,
            description=item.description,
            quantity=item.quantity,
            unit=item.unit,
            unit_price=item.unit_price,
            total=item.total,
        )
        for item in quotation.items.all()
    ])
    return purchase_order


def accept(quotation, po_number=None, po_date=None, expiry_date=None, user=None):
    """
    Accept a quotation. With a PO number, the customer purchase order is
    created, linked both ways, and the source inquiry becomes converted_to_po.
    Returns the purchase order or None.
    """
    with transaction.atomic():
        _transition(quotation, 'accepted', ACCEPTABLE_STATUSES)
        if not po_number:
            return None

        purchase_order = create_purchase_order(quotation, po_number, po_date, expiry_date, user)
        quotation.purchase_order = purchase_order
        quotation.save(update_fields=['purchase_order', 'updated_at'])

        inquiry = quotation.inquiry
        if inquiry is not None:
            inquiry.status = 'converted_to_po'
            inquiry.purchase_order = purchase_order
            inquiry.save(update_fields=['status', 'purchase_order', 'updated_at'])

    logger.info(f"Quotation {quotation.quotation_number} converted to purchase order {purchase_order.po_number}")
    return purchase_order


def expire_overdue(today=None):
    """Expire open quotations past their validity date; returns the number expired"""
    today = today or timezone.localdate()
    expired = Quotation.objects.filter(
        status__in=EXPIRABLE_STATUSES,
        validity_date__lt=today,
    ).update(status='expired', updated_at=timezone.now())
    if expired:
        # Bulk update sends no signals
        invalidate_dashboard_cache()
        logger.info(f"Expired {expired} overdue quotation(s)")
    return expired


def price_history(material_code, customer=None):
    """Quotations quoting a material code, optionally for one customer, newest first"""
    queryset = Quotation.objects.filter(items__item_code__iexact=material_code.strip())
    if customer:
        queryset = queryset.filter(customer_name__icontains=customer.strip())
    return queryset.distinct().prefetch_related('items').order_by('-quotation_date', '-id')


def default_validity_date(quotation_date=None):
    quotation_date = quotation_date or timezone.localdate()
    return quotation_date + timedelta(days=settings.PO_PROCESSOR['QUOTATION_VALIDITY_DAYS'])


def default_vat_percent():
    return Decimal(str(settings.PO_PROCESSOR['DEFAULT_VAT_PERCENT']))
