"""Quotation arithmetic and catalog price matching"""
import logging
from decimal import Decimal

from django.conf import settings

from po_processor.core.currency import to_money

logger = logging.getLogger(__name__)


def _value(item, field):
    if isinstance(item, dict):
        return item.get(field) or 0
    return getattr(item, field) or 0


def line_total(quantity, unit_price):
    return to_money(Decimal(str(quantity)) * Decimal(str(unit_price)))


def calculate_totals(items, vat_percent):
    """
    Return subtotal, VAT and grand total for quotation items.

    Items may be model instances or dicts with quantity and unit_price.
    """
    subtotal = sum(
        (line_total(_value(item, 'quantity'), _value(item, 'unit_price')) for item in items),
        Decimal('0.00')
    )
    vat_amount = to_money(subtotal * Decimal(str(vat_percent or 0)) / 100)
    return {
        'subtotal': subtotal,
        'vat_amount': vat_amount,
        'grand_total': subtotal + vat_amount,
    }


def price_for(prices, item):
    """Look up an item's price by id, then by item name; 0.00 when absent"""
    if not prices:
        return Decimal('0.00')
    for key in (str(item.id), item.id, item.item_name):
        value = prices.get(key)
        if value not in (None, ''):
            return to_money(value)
    return Decimal('0.00')


def catalog_price(item_name, description=''):
    """
    Unit price of the first catalog keyword found in the item's name or
    description; 0.00 when nothing matches.
    """
    search_text = f"{item_name or ''} {description or ''}".strip().upper()
    if not search_text:
        return Decimal('0.00')
    for keyword, price in settings.PO_PROCESSOR.get('PRODUCT_CATALOG', {}).items():
        if keyword.upper() in search_text:
            logger.debug(f"Catalog match '{keyword}' -> {price} for '{search_text}'")
            return to_money(price)
    return Decimal('0.00')
