"""Delivery document totals, creation from purchase orders and status flow"""
import logging
from decimal import Decimal

from django.db import transaction
from rest_framework.exceptions import ValidationError

from po_processor.core.currency import to_money
from po_processor.core.numbering import next_document_number

from .models import DeliveryDocument, DeliveryItem

logger = logging.getLogger(__name__)

STATUS_FLOW = {
    'generated': ('draft',),
    'sent': ('generated',),
}


def next_delivery_document_number(today=None):
    return next_document_number('DOC', DeliveryDocument, 'document_number', today)


def calculate_totals(line_totals, vat_percent):
    """
    Subtotal, VAT and total for a set of line totals.

    VAT is None when the rate is not positive.
    """
    subtotal = to_money(sum((Decimal(str(total)) for total in line_totals), Decimal('0.00')))
    rate = Decimal(str(vat_percent or 0))
    vat_amount = to_money(subtotal * rate / 100) if rate > 0 else None
    return {
        'subtotal': subtotal,
        'vat_amount': vat_amount,
        'total_amount': subtotal + (vat_amount or Decimal('0.00')),
    }


def update_totals(document):
    totals = calculate_totals([item.total for item in document.items.all()], document.vat_percent)
    document.subtotal = totals['subtotal']
    document.vat_amount = totals['vat_amount']
    document.total_amount = totals['total_amount']
    document.save(update_fields=['subtotal', 'vat_amount', 'total_amount', 'updated_at'])
    return document


def create_from_purchase_order(purchase_order, document_type='both', vat_percent=None,
                               supplier_order=None, customer_trn='', user=None):
    """Issue a delivery document carrying the purchase order's customer and items"""
    if supplier_order is not None and supplier_order.purchase_order_id not in (None, purchase_order.id):
        raise ValidationError({'supplier_order': 'Supplier order belongs to a different purchase order.'})

    with transaction.atomic():
        document = DeliveryDocument.objects.create(
            document_number=next_delivery_document_number(),
            document_type=document_type,
            customer_name=purchase_order.customer_name,
            customer_address=purchase_order.customer_address,
            customer_email=purchase_order.customer_email,
            customer_phone=purchase_order.customer_phone,
            customer_trn=customer_trn or '',
            vat_percent=vat_percent or Decimal('0.00'),
            currency=purchase_order.currency,
            terms=purchase_order.terms,
            purchase_order=purchase_order,
            supplier_order=supplier_order,
            created_by=user,
        )
        DeliveryItem.objects.bulk_create([
            DeliveryItem(
                document=document,
                item_name=item.item_name,
                item_code=item.item_code,
                description=item.description,
                quantity=item.quantity,
                unit=item.unit,
                unit_price=item.unit_price,
                total=item.total,
            )
            for item in purchase_order.items.all()
        ])
        update_totals(document)

    logger.info(f"Created delivery document {document.document_number} from purchase order {purchase_order.po_number}")
    return document


def _advance(document, new_status):
    if document.status not in STATUS_FLOW[new_status]:
        raise ValidationError({
            'error': f"Cannot change delivery document status from '{document.status}' to '{new_status}'."
        })
    old_status = document.status
    document.status = new_status
    document.save(update_fields=['status', 'updated_at'])
    return old_status


def mark_generated(document):
    return _advance(document, 'generated')


def mark_sent(document):
    return _advance(document, 'sent')
