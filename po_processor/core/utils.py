"""Utility functions for audit logging and document line items"""
import logging
from decimal import Decimal

from .currency import to_money
from .models import AuditLog

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, delete, status_change, convert, ...)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., customer name)
        object_reference: Document number (e.g., quotation number, PO number)
    """
    try:
        audit_user = None
        if user:
            audit_user = user
        elif request and hasattr(request, 'user'):
            audit_user = request.user

        ip_address = get_client_ip(request) if request else None

        if not action or not model_name or not object_id:
            logger.warning(
                f"Audit log creation skipped: missing required fields "
                f"(action={action}, model_name={model_name}, object_id={object_id})"
            )
            return None

        return AuditLog.objects.create(
            user=audit_user if audit_user and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            object_reference=object_reference,
            changes=changes or {},
            ip_address=ip_address
        )
    except Exception as e:
        # Don't fail the main operation if audit logging fails
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def replace_items(parent, items_data, item_model, parent_field, with_totals=True):
    """
    Replace the nested line items of a document.

    Each item's total is quantity x unit price unless a positive total was given.
    """
    # Prefetched items are stale once replaced
    getattr(parent, '_prefetched_objects_cache', {}).pop('items', None)
    parent.items.all().delete()
    created = []
    for item_data in items_data:
        item_data = dict(item_data)
        item_data.pop('id', None)
        if with_totals and not item_data.get('total'):
            quantity = item_data.get('quantity', Decimal('1'))
            item_data['total'] = to_money(quantity * item_data.get('unit_price', Decimal('0')))
        created.append(item_model.objects.create(**{parent_field: parent}, **item_data))
    return created
