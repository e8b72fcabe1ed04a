"""Currency symbols, amount formatting and currency detection"""
from decimal import Decimal, ROUND_HALF_UP

DEFAULT_SYMBOL = '₹'

CURRENCY_SYMBOLS = {
    'INR': '₹',
    'AED': 'AED ',
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'SAR': 'SAR ',
    'QAR': 'QAR ',
    'KWD': 'KWD ',
    'OMR': 'OMR ',
    'BHD': 'BHD ',
}

# Checked in order; the first currency with a matching marker wins
CURRENCY_MARKERS = [
    ('AED', ('AED', 'DIRHAM')),
    ('INR', ('INR', '₹', 'RUPEE')),
    ('USD', ('USD', '$', 'DOLLAR')),
    ('EUR', ('EUR', '€', 'EURO')),
    ('GBP', ('GBP', '£', 'POUND')),
    ('SAR', ('SAR',)),
    ('QAR', ('QAR',)),
    ('KWD', ('KWD',)),
    ('OMR', ('OMR',)),
    ('BHD', ('BHD',)),
]


def get_currency_symbol(currency_code):
    """Get currency symbol for a currency code (INR when empty)"""
    if not currency_code:
        return DEFAULT_SYMBOL
    code = currency_code.upper()
    return CURRENCY_SYMBOLS.get(code, f'{code} ')


def format_amount(amount, currency_code):
    """Format amount with currency symbol and two decimals"""
    value = Decimal(str(amount)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    return f'{get_currency_symbol(currency_code)}{value}'


def detect_currency(text):
    """Detect a currency code from free text, or None"""
    if not text:
        return None
    upper_text = text.upper()
    for code, markers in CURRENCY_MARKERS:
        if any(marker in upper_text for marker in markers):
            return code
    return None


def to_money(value):
    """Quantize a value to two decimal places"""
    return Decimal(str(value or 0)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
