"""
Display metadata for document statuses.

Clients render every status badge from these tables so the label, colour and
icon of a status are defined once.
"""

UNKNOWN_COLOR = 'grey'
UNKNOWN_ICON = 'help_outline'

STATUS_DISPLAY = {
    'inquiry': {
        'pending': ('Pending', 'orange', 'hourglass_empty'),
        'reviewed': ('Reviewed', 'blue', 'visibility'),
        'quoted': ('Quoted', 'green', 'check_circle'),
        'partially_quoted': ('Partially Quoted', 'teal', 'pending_actions'),
        'converted_to_po': ('Converted to PO', 'purple', 'shopping_cart'),
    },
    'quotation': {
        'draft': ('Draft', 'orange', 'edit_note'),
        'ready': ('Quote Ready', 'blue', 'task_alt'),
        'sent': ('Sent', 'blue', 'send'),
        'pending': ('Pending', 'yellow', 'hourglass_empty'),
        'accepted': ('Accepted', 'green', 'check_circle'),
        'rejected': ('Rejected', 'red', 'cancel'),
        'expired': ('Expired', 'grey', 'event_busy'),
    },
    'purchase_order': {
        'active': ('Active', 'green', 'check_circle'),
        'expiring_soon': ('Expiring Soon', 'orange', 'warning'),
        'expired': ('Expired', 'red', 'error'),
    },
    'supplier_order': {
        'pending': ('Pending', 'orange', 'hourglass_empty'),
        'confirmed': ('Confirmed', 'blue', 'thumb_up'),
        'in_transit': ('In Transit', 'purple', 'local_shipping'),
        'delivered': ('Delivered', 'green', 'inventory'),
        'cancelled': ('Cancelled', 'red', 'cancel'),
    },
    'delivery_status': {
        'draft': ('Draft', 'orange', 'edit_note'),
        'generated': ('Generated', 'blue', 'description'),
        'sent': ('Sent', 'green', 'send'),
    },
    'delivery_type': {
        'commercial_invoice': ('Commercial Invoice', 'blue', 'receipt'),
        'delivery_order': ('Delivery Order', 'blue', 'local_shipping'),
        'both': ('Both', 'blue', 'description'),
    },
    'stock': {
        'Understock': ('Understock', 'orange', 'arrow_downward'),
        'Surplus': ('Surplus', 'green', 'arrow_upward'),
    },
    'health': {
        'Healthy': ('Healthy', 'green', 'verified'),
        'Moderate': ('Moderate', 'orange', 'info'),
        'At Risk': ('At Risk', 'orange', 'warning'),
        'Critical': ('Critical', 'red', 'error'),
    },
}

# Purchase orders fall back to the active badge for any other status
DEFAULT_STATUS = {
    'purchase_order': 'active',
}


def status_display(kind, status):
    """Return {'status', 'label', 'color', 'icon'} for a status of a document kind.

    Raises KeyError for an unknown kind. Unknown statuses get a grey badge
    labelled with the raw status.
    """
    table = STATUS_DISPLAY[kind]
    entry = table.get(status)
    if entry is None and kind in DEFAULT_STATUS:
        entry = table[DEFAULT_STATUS[kind]]
    if entry is None:
        return {'status': status, 'label': status, 'color': UNKNOWN_COLOR, 'icon': UNKNOWN_ICON}
    label, color, icon = entry
    return {'status': status, 'label': label, 'color': color, 'icon': icon}
