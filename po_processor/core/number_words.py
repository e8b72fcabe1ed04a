"""Convert amounts to words for commercial documents"""
from decimal import Decimal, ROUND_HALF_UP

ONES = [
    '', 'One', 'Two', 'Three', 'Four', 'Five', 'Six', 'Seven', 'Eight', 'Nine',
    'Ten', 'Eleven', 'Twelve', 'Thirteen', 'Fourteen', 'Fifteen', 'Sixteen',
    'Seventeen', 'Eighteen', 'Nineteen',
]

TENS = ['', '', 'Twenty', 'Thirty', 'Forty', 'Fifty', 'Sixty', 'Seventy', 'Eighty', 'Ninety']

CURRENCY_NOUNS = {
    'AED': 'Dirham',
    'USD': 'Dollar',
    'INR': 'Rupee',
}


def number_to_words(number):
    """Spell out a non-negative integer (Thousand, Lakh, Million scale)"""
    if number == 0:
        return 'Zero'
    if number < 20:
        return ONES[number]
    if number < 100:
        tens_digit, ones_digit = divmod(number, 10)
        if ones_digit == 0:
            return TENS[tens_digit]
        return f'{TENS[tens_digit]}-{ONES[ones_digit]}'
    if number < 1000:
        hundreds, remainder = divmod(number, 100)
        if remainder == 0:
            return f'{ONES[hundreds]} Hundred'
        return f'{ONES[hundreds]} Hundred {number_to_words(remainder)}'
    if number < 100000:
        thousands, remainder = divmod(number, 1000)
        if remainder == 0:
            return f'{number_to_words(thousands)} Thousand'
        return f'{number_to_words(thousands)} Thousand {number_to_words(remainder)}'
    if number < 1000000:
        lakhs, remainder = divmod(number, 100000)
        if remainder == 0:
            return f'{number_to_words(lakhs)} Lakh'
        return f'{number_to_words(lakhs)} Lakh {number_to_words(remainder)}'
    millions, remainder = divmod(number, 1000000)
    if remainder == 0:
        return f'{number_to_words(millions)} Million'
    return f'{number_to_words(millions)} Million {number_to_words(remainder)}'


def amount_in_words(amount, currency='AED'):
    """
    Convert an amount to words, e.g.
    1250.50 AED -> "One Thousand Two Hundred Fifty Dirhams and Fifty Cents"
    """
    value = Decimal(str(amount)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    if value < 0:
        raise ValueError('Amount must not be negative')
    whole = int(value)
    cents = int((value - whole) * 100)

    words = number_to_words(whole)
    code = (currency or '').upper()
    noun = CURRENCY_NOUNS.get(code)
    if noun:
        words += f" {noun}{'s' if whole != 1 else ''}"
    else:
        words += f' {currency}'

    if cents > 0:
        words += f" and {number_to_words(cents)} Cent{'s' if cents != 1 else ''}"
    return words
