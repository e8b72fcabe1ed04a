"""
Inquiry workflow: status derivation, review and conversion into quotations.
"""
import logging
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from po_processor.core.numbering import next_document_number, next_quotation_number
from po_processor.quotations.models import Quotation, QuotationItem
from po_processor.quotations.pricing import calculate_totals, catalog_price, line_total, price_for

from .models import CustomerInquiry

logger = logging.getLogger(__name__)


def next_inquiry_number(today=None):
    return next_document_number('INQ', CustomerInquiry, 'inquiry_number', today)


def derive_status(inquiry):
    """
    Status implied by the inquiry's items.

    converted_to_po never changes; otherwise all items quoted -> quoted,
    some -> partially_quoted, none -> pending (or reviewed if it was reviewed).
    """
    if inquiry.status == 'converted_to_po':
        return 'converted_to_po'
    statuses = list(inquiry.items.values_list('status', flat=True))
    quoted = statuses.count('quoted')
    pending = len(statuses) - quoted
    if quoted and not pending:
        return 'quoted'
    if quoted:
        return 'partially_quoted'
    if inquiry.status == 'reviewed':
        return 'reviewed'
    return 'pending'


def refresh_status(inquiry):
    """Persist the derived status; returns it"""
    new_status = derive_status(inquiry)
    if new_status != inquiry.status:
        logger.debug(f"Inquiry {inquiry.inquiry_number} status {inquiry.status} -> {new_status}")
        inquiry.status = new_status
        inquiry.save(update_fields=['status', 'updated_at'])
    return new_status


def mark_reviewed(inquiry):
    if inquiry.status == 'converted_to_po':
        raise ValidationError({'error': 'Inquiry has already been converted to a purchase order.'})
    if inquiry.status == 'pending':
        inquiry.status = 'reviewed'
        inquiry.save(update_fields=['status', 'updated_at'])
    return refresh_status(inquiry)


def create_quotation(inquiry, prices=None, validity_date=None, currency=None,
                     terms='', notes='', vat_percent=None, use_catalog=True, user=None, today=None):
    """
    Build a quotation from an inquiry's items.

    Prices are looked up by item id or name, falling back to the product
    catalog unless use_catalog is off. Items with a positive price are marked
    ready and their inquiry item quoted; the rest stay pending at price 0.
    The quotation is 'ready' only when every item is priced.
    """
    if inquiry.status == 'converted_to_po':
        raise ValidationError({'error': 'Inquiry has already been converted to a purchase order.'})

    today = today or timezone.localdate()
    config = settings.PO_PROCESSOR
    if vat_percent is None:
        vat_percent = Decimal(str(config['DEFAULT_VAT_PERCENT']))
    if validity_date is None:
        validity_date = today + timedelta(days=config['QUOTATION_VALIDITY_DAYS'])

    inquiry_items = list(inquiry.items.all())
    if not inquiry_items:
        raise ValidationError({'error': 'Inquiry has no items to quote.'})

    with transaction.atomic():
        quotation = Quotation.objects.create(
            quotation_number=next_quotation_number(today),
            quotation_date=today,
            validity_date=validity_date,
            customer_name=inquiry.customer_name,
            customer_address=inquiry.customer_address,
            customer_email=inquiry.customer_email or inquiry.sender_email,
            customer_phone=inquiry.customer_phone,
            currency=currency or config['DEFAULT_CURRENCY'],
            vat_percent=vat_percent,
            terms=terms or '',
            notes=notes or '',
            inquiry=inquiry,
            created_by=user,
        )

        quotation_items = []
        for inquiry_item in inquiry_items:
            price = price_for(prices, inquiry_item)
            if price <= 0 and use_catalog:
                price = catalog_price(inquiry_item.item_name, inquiry_item.description)
            priced = price > 0
            quotation_items.append(QuotationItem.objects.create(
                quotation=quotation,
                item_name=inquiry_item.item_name,
                item_code=inquiry_item.item_code,
                description=inquiry_item.description,
                quantity=inquiry_item.quantity,
                unit=inquiry_item.unit,
                unit_price=price if priced else Decimal('0.00'),
                total=line_total(inquiry_item.quantity, price) if priced else Decimal('0.00'),
                manufacturer_part=inquiry_item.manufacturer_part,
                is_priced=priced,
                status='ready' if priced else 'pending',
            ))
            if priced and inquiry_item.status != 'quoted':
                inquiry_item.status = 'quoted'
                inquiry_item.save(update_fields=['status'])

        totals = calculate_totals(quotation_items, vat_percent)
        quotation.total_amount = totals['grand_total']
        quotation.status = 'ready' if all(item.is_priced for item in quotation_items) else 'draft'
        quotation.save(update_fields=['total_amount', 'status', 'updated_at'])

        refresh_status(inquiry)

    logger.info(
        f"Created quotation {quotation.quotation_number} from inquiry {inquiry.inquiry_number} "
        f"({sum(1 for item in quotation_items if item.is_priced)}/{len(quotation_items)} priced)"
    )
    return quotation
