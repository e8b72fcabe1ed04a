"""
Material procurement forecast

Reads the purchase history of a material from customer purchase order
line items and decides whether the material is worth keeping in stock.
"""
import logging
import math
from datetime import timedelta

from django.utils import timezone

from po_processor.core.cache_utils import FORECAST_CACHE_TTL, cached_query
from po_processor.orders.models import LineItem

logger = logging.getLogger(__name__)

STOCK = 'Stock'
DO_NOT_STOCK = 'Do Not Stock'

DEFAULT_LEAD_TIME_DAYS = 30.0
MIN_PURCHASES_TO_STOCK = 3
MIN_CONSISTENCY = 0.5
FREQUENT_INTERVAL_DAYS = 60
LONG_LEAD_TIME_DAYS = 30
HIGH_CONSUMPTION_PER_MONTH = 10


def one_year_before(day):
    try:
        return day.replace(year=day.year - 1)
    except ValueError:
        # 29 February
        return day.replace(year=day.year - 1, day=28)


def codes_match(item_code, search_code):
    """Case-insensitive exact match, or either code containing the other"""
    item_code = item_code.strip().lower()
    if not item_code:
        return False
    return item_code == search_code or search_code in item_code or item_code in search_code


def months_between(start, end):
    return (end.year - start.year) * 12 + (end.month - start.month) + (end.day - start.day) / 30.0


def collect_purchases(material_code, today):
    """
    Purchase events for a material, oldest first, with the first matching item name.

    Orders are scanned newest first. A purchase older than twelve months is
    still kept while fewer than two purchases have been collected.
    """
    search_code = material_code.strip().lower()
    cutoff = one_year_before(today)
    purchases = []
    material_name = None

    line_items = (
        LineItem.objects.exclude(item_code='')
        .select_related('purchase_order')
        .order_by('-purchase_order__created_at', '-purchase_order__id', 'id')
    )
    for item in line_items:
        if not codes_match(item.item_code, search_code):
            continue
        if material_name is None:
            material_name = item.item_name

        po = item.purchase_order
        within_window = po.po_date > cutoff - timedelta(days=1)
        if not within_window and len(purchases) >= 2:
            logger.debug(f"Skipped {po.po_number}: outside the 12 month window")
            continue

        purchases.append({
            'purchase_date': po.po_date,
            'quantity': float(item.quantity),
            'unit': item.unit,
            'po_number': po.po_number,
            'lead_time_days': (po.expiry_date - po.po_date).days,
        })

    purchases.sort(key=lambda purchase: purchase['purchase_date'])
    return purchases, material_name


def determine_recommendation(purchase_count, average_interval, consistency, average_lead_time, consumption_rate):
    """Returns (decision, reason)"""
    if purchase_count < MIN_PURCHASES_TO_STOCK:
        return DO_NOT_STOCK, (
            'Insufficient purchase history (less than 3 purchases in the last 12 months). '
            'Order on-demand.'
        )

    should_stock = consistency > MIN_CONSISTENCY and (
        average_interval < FREQUENT_INTERVAL_DAYS
        or average_lead_time > LONG_LEAD_TIME_DAYS
        or consumption_rate > HIGH_CONSUMPTION_PER_MONTH
    )

    if should_stock:
        reason = 'Recommended to stock because:'
        if consistency > MIN_CONSISTENCY:
            reason += ' Purchase pattern is consistent'
        if average_interval < FREQUENT_INTERVAL_DAYS:
            reason += f', Frequent purchases (every {average_interval:.0f} days)'
        if average_lead_time > LONG_LEAD_TIME_DAYS:
            reason += f', Long lead time ({average_lead_time:.0f} days)'
        if consumption_rate > HIGH_CONSUMPTION_PER_MONTH:
            reason += f', High consumption rate ({consumption_rate:.1f} units/month)'
        return STOCK, reason + '.'

    reason = 'Recommended not to stock because:'
    if consistency <= MIN_CONSISTENCY:
        reason += ' Purchase pattern is inconsistent'
    if average_interval >= FREQUENT_INTERVAL_DAYS:
        reason += f', Infrequent purchases (every {average_interval:.0f} days)'
    if average_lead_time <= LONG_LEAD_TIME_DAYS:
        reason += f', Short lead time ({average_lead_time:.0f} days)'
    if consumption_rate <= HIGH_CONSUMPTION_PER_MONTH:
        reason += f', Low consumption rate ({consumption_rate:.1f} units/month)'
    return DO_NOT_STOCK, reason + '. Order on-demand.'


def build_forecast(material_code, material_name, purchases):
    """Forecast statistics for a non-empty, date-ordered purchase list"""
    total_quantity = sum(purchase['quantity'] for purchase in purchases)
    purchase_count = len(purchases)

    lead_times = [purchase['lead_time_days'] for purchase in purchases if purchase['lead_time_days'] > 0]
    average_lead_time = sum(lead_times) / len(lead_times) if lead_times else DEFAULT_LEAD_TIME_DAYS

    intervals = []
    for previous, current in zip(purchases, purchases[1:]):
        days_between = (current['purchase_date'] - previous['purchase_date']).days
        if days_between > 0:
            intervals.append(days_between)
    average_interval = sum(intervals) / len(intervals) if intervals else 0.0

    months = months_between(purchases[0]['purchase_date'], purchases[-1]['purchase_date'])
    consumption_rate = total_quantity / months if months > 0 else total_quantity / 12.0

    consistency = 1.0
    if intervals and average_interval > 0:
        variance = sum((interval - average_interval) ** 2 for interval in intervals) / len(intervals)
        coefficient_of_variation = math.sqrt(variance) / average_interval
        consistency = max(0.0, 1.0 - coefficient_of_variation / 2.0)

    predicted_next_order_date = None
    if average_interval > 0:
        predicted_next_order_date = purchases[-1]['purchase_date'] + timedelta(days=math.floor(average_interval + 0.5))

    decision, reason = determine_recommendation(
        purchase_count=purchase_count,
        average_interval=average_interval,
        consistency=consistency,
        average_lead_time=average_lead_time,
        consumption_rate=consumption_rate,
    )

    return {
        'material_code': material_code,
        'material_name': material_name or material_code,
        'average_lead_time_days': average_lead_time,
        'consumption_rate_per_month': consumption_rate,
        'predicted_next_order_date': predicted_next_order_date,
        'recommendation': decision,
        'recommendation_reason': reason,
        'purchase_history': purchases,
        'total_quantity_last_12_months': total_quantity,
        'purchase_count_last_12_months': purchase_count,
        'average_days_between_purchases': average_interval,
        'purchase_frequency_consistency': consistency,
    }


@cached_query(cache_ttl=FORECAST_CACHE_TTL, key_prefix="material_forecast")
def analyze_material(material_code, today=None):
    """
    Forecast for a material code, or None when no purchase order line matches it.

    Pass `today` explicitly when caching matters; it is part of the cache key.
    """
    today = today or timezone.localdate()
    logger.debug(f"Starting forecast analysis for material code: {material_code!r}")

    purchases, material_name = collect_purchases(material_code, today)
    if not purchases:
        logger.debug(f"No purchases found for material code: {material_code!r}")
        return None

    logger.debug(f"Found {len(purchases)} purchases for {material_code!r}")
    return build_forecast(material_code, material_name, purchases)
