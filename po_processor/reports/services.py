"""Dashboard statistics across the purchase order pipeline"""
import logging
from datetime import timedelta
from decimal import Decimal

from django.db.models import Count, Q, Sum
from django.utils import timezone

from po_processor.core.cache_utils import cache_dashboard_stats, get_cached_dashboard_stats
from po_processor.core.currency import to_money
from po_processor.delivery.models import DeliveryDocument
from po_processor.inquiries.models import CustomerInquiry
from po_processor.orders.models import PurchaseOrder
from po_processor.orders.serializers import PurchaseOrderSerializer
from po_processor.orders.services import expiring_cutoff
from po_processor.purchasing.models import SupplierOrder
from po_processor.quotations.models import Quotation

logger = logging.getLogger(__name__)

EXPIRING_WINDOW_DAYS = 7


def status_counts(model):
    """Count of documents per status, with every declared status present"""
    counts = {value: 0 for value, _label in model.STATUS_CHOICES}
    for row in model.objects.values('status').annotate(count=Count('id')):
        counts[row['status']] = row['count']
    return counts


def purchase_order_status_counts(today):
    """Orders per date-derived status, with the boundaries of the list status filter"""
    cutoff = expiring_cutoff(today)
    return PurchaseOrder.objects.aggregate(
        active=Count('id', filter=Q(expiry_date__gt=cutoff)),
        expiring_soon=Count('id', filter=Q(expiry_date__gte=today, expiry_date__lte=cutoff)),
        expired=Count('id', filter=Q(expiry_date__lt=today)),
    )


def _total(queryset):
    return to_money(queryset.aggregate(total=Sum('total_amount'))['total'] or Decimal('0.00'))


def build_dashboard_stats(today):
    """
    Purchase order totals for the whole book and for today, orders expiring
    in the next week, and pipeline counts per document status.
    """
    orders = PurchaseOrder.objects.all()
    today_orders = orders.filter(po_date=today)
    # Strictly after today and within the week ahead
    expiring = orders.filter(
        expiry_date__gt=today,
        expiry_date__lte=today + timedelta(days=EXPIRING_WINDOW_DAYS),
    ).prefetch_related('items').order_by('expiry_date', 'po_number')

    return {
        'date': today.isoformat(),
        'total_pos': orders.count(),
        'today_pos': today_orders.count(),
        'total_value': str(_total(orders)),
        'today_value': str(_total(today_orders)),
        'expiring_this_week': expiring.count(),
        'expiring_pos': list(PurchaseOrderSerializer(expiring, many=True).data),
        'pipeline': {
            'inquiries': status_counts(CustomerInquiry),
            'quotations': status_counts(Quotation),
            'purchase_orders': purchase_order_status_counts(today),
            'supplier_orders': status_counts(SupplierOrder),
            'delivery_documents': status_counts(DeliveryDocument),
        },
    }


def dashboard_stats(today=None):
    """Dashboard statistics for a day, served from cache when available"""
    today = today or timezone.localdate()
    data, cache_key = get_cached_dashboard_stats(today.isoformat())
    if data is not None:
        logger.debug(f"Cache HIT for dashboard stats: {cache_key}")
        return data

    data = build_dashboard_stats(today)
    cache_dashboard_stats(cache_key, data)
    return data
