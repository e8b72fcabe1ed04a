"""
Document number generation.

Numbers are derived from the highest number already issued for the day, so
callers run inside a transaction and rely on the unique constraint of the
number field.
"""
import re

from django.conf import settings
from django.utils import timezone
from rest_framework.exceptions import ValidationError

QUOTATION_SERIAL_START = 100000
QUOTATION_SERIAL_MAX = 999998

_serial_re = re.compile(r'-(\d+)$')


def _today(today=None):
    return today or timezone.localdate()


def next_quotation_number(today=None):
    """
    Return the next quotation number for the day: ``ALK DD-MM-YYYY-XXXXXX``.

    Serials start at 100000 and step by two, so an even serial is followed by
    serial + 2 and an odd one by serial + 1. Past 999998 no number is issued.
    """
    from po_processor.quotations.models import Quotation

    today = _today(today)
    prefix = f"{settings.PO_PROCESSOR['QUOTATION_NUMBER_PREFIX']} {today.strftime('%d-%m-%Y')}-"
    numbers = Quotation.objects.filter(
        quotation_number__startswith=prefix
    ).values_list('quotation_number', flat=True)

    highest = None
    for number in numbers:
        serial = number[len(prefix):]
        if len(serial) != 6 or not serial.isdigit():
            continue
        value = int(serial)
        if value < QUOTATION_SERIAL_START:
            continue
        if highest is None or value > highest:
            highest = value

    if highest is None:
        serial = QUOTATION_SERIAL_START
    elif highest % 2 == 0:
        serial = highest + 2
    else:
        serial = highest + 1
    if serial > QUOTATION_SERIAL_MAX:
        raise ValidationError({'error': f"Daily quotation serials exhausted for {today.strftime('%d-%m-%Y')}."})
    return f'{prefix}{serial:06d}'


def next_document_number(prefix, model, field, today=None):
    """Return the next ``PREFIX-YYYYMMDD-NNNN`` number for ``model.field``"""
    today = _today(today)
    day_prefix = f"{prefix}-{today.strftime('%Y%m%d')}-"
    numbers = model.objects.filter(
        **{f'{field}__startswith': day_prefix}
    ).values_list(field, flat=True)

    highest = 0
    for number in numbers:
        match = _serial_re.search(number)
        if match:
            highest = max(highest, int(match.group(1)))
    return f'{day_prefix}{highest + 1:04d}'
