"""
Cache invalidation signals
Automatically invalidate cached dashboard and forecast data when documents change
"""
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging

from .cache_utils import invalidate_dashboard_cache, invalidate_forecast_cache

logger = logging.getLogger(__name__)

# Models whose changes affect the dashboard pipeline counts
DASHBOARD_MODELS = ['PurchaseOrder', 'CustomerInquiry', 'Quotation', 'SupplierOrder', 'DeliveryDocument']
# Models whose changes affect material forecasts
FORECAST_MODELS = ['PurchaseOrder', 'LineItem']


@receiver([post_save, post_delete])
def invalidate_dashboard_on_change(sender, instance, **kwargs):
    """Invalidate dashboard statistics when a business document changes"""
    if sender.__name__ not in DASHBOARD_MODELS:
        return
    try:
        # Invalidate after commit so the cache is not repopulated with stale data
        transaction.on_commit(invalidate_dashboard_cache)
    except Exception as e:
        logger.warning(f"Error in invalidate_dashboard_on_change signal: {e}")


@receiver([post_save, post_delete])
def invalidate_forecast_on_change(sender, instance, **kwargs):
    """Invalidate material forecasts when purchase order lines change"""
    if sender.__name__ not in FORECAST_MODELS:
        return
    if sender._meta.app_label != 'orders':
        return
    try:
        transaction.on_commit(invalidate_forecast_cache)
    except Exception as e:
        logger.warning(f"Error in invalidate_forecast_on_change signal: {e}")
