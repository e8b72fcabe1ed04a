"""Purchase order expiry tracking and aggregate look-ups"""
import logging
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from po_processor.core.cache_utils import FORECAST_CACHE_TTL, cached_query, invalidate_dashboard_cache
from po_processor.core.currency import to_money

from .models import LineItem, PurchaseOrder

logger = logging.getLogger(__name__)


def expiring_cutoff(today=None):
    today = today or timezone.localdate()
    return today + timedelta(days=settings.PO_PROCESSOR['EXPIRY_ALERT_DAYS'])


def expiring_orders(today=None):
    """Orders expiring within the alert window, soonest first"""
    today = today or timezone.localdate()
    return PurchaseOrder.objects.filter(
        expiry_date__gte=today,
        expiry_date__lte=expiring_cutoff(today),
    ).prefetch_related('items').order_by('expiry_date', 'po_number')


def expired_orders(today=None):
    """Orders past their expiry date, most recently expired first"""
    today = today or timezone.localdate()
    return PurchaseOrder.objects.filter(
        expiry_date__lt=today,
    ).prefetch_related('items').order_by('-expiry_date', 'po_number')


def recalculate_total(purchase_order):
    """Set the order total to the sum of its line totals"""
    purchase_order.total_amount = to_money(purchase_order.get_subtotal())
    purchase_order.save(update_fields=['total_amount', 'status', 'updated_at'])
    return purchase_order.total_amount


def refresh_statuses(today=None):
    """Persist the date-derived status of every order; returns the number changed"""
    changed = 0
    for purchase_order in PurchaseOrder.objects.only('id', 'status', 'expiry_date'):
        new_status = purchase_order.effective_status(today)
        if purchase_order.status != new_status:
            PurchaseOrder.objects.filter(pk=purchase_order.pk).update(status=new_status)
            changed += 1
    if changed:
        invalidate_dashboard_cache()
    logger.info(f"Refreshed purchase order statuses: {changed} changed")
    return changed


@cached_query(cache_ttl=FORECAST_CACHE_TTL, key_prefix="material_codes")
def material_codes():
    """Sorted unique non-blank item codes across all purchase orders"""
    codes = LineItem.objects.exclude(item_code='').values_list('item_code', flat=True).distinct()
    return sorted({code.strip() for code in codes if code and code.strip()})
