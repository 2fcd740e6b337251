"""
Presentation filters for PFMS amounts.

These only format values for display; the stored Decimal amounts and the
engine's totals are never altered.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django import template

register = template.Library()

LAKH = Decimal('100000')
CRORE = Decimal('10000000')
RUPEE = '₹'


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _group_indian(integer_digits: str) -> str:
    """Group digits the Indian way: 12,34,567."""
    if len(integer_digits) <= 3:
        return integer_digits
    head, tail = integer_digits[:-3], integer_digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ','.join(groups + [tail])


def _wrap_negative(text: str, negative: bool) -> str:
    return f"({text})" if negative else text


@register.filter(name='currency')
def currency(value):
    """
    Format number with thousand separators and 2 decimal places.

    Usage: {{ amount|currency }}
    Result: 1,234,567.89
    """
    try:
        if value is None:
            return '0.00'
        return '{:,.2f}'.format(_to_decimal(value))
    except (ValueError, TypeError, InvalidOperation):
        return value


@register.filter(name='indian_number')
def indian_number(value, places: int = 2):
    """
    Format with lakh/crore digit grouping.

    Usage: {{ amount|indian_number }}
    Result: 12,34,567.89
    """
    try:
        if value is None:
            value = 0
        amount = _to_decimal(value)
        places = int(places)
        quantum = Decimal(1).scaleb(-places)
        rounded = abs(amount).quantize(quantum, rounding=ROUND_HALF_UP)
        integer_part, _, fraction = f"{rounded:.{places}f}".partition('.')
        text = _group_indian(integer_part)
        if places:
            text = f"{text}.{fraction}"
        return f"-{text}" if amount < 0 else text
    except (ValueError, TypeError, InvalidOperation):
        return value


@register.filter(name='compact_amount')
def compact_amount(value):
    """
    Compact rupee amount in crore / lakh units, negatives in parentheses.

    Usage: {{ balance|compact_amount }}
    Result: ₹1.50 Cr, ₹2.25 L, ₹45,000, (₹3 L)
    """
    try:
        if value is None:
            value = 0
        amount = _to_decimal(value)
    except (ValueError, TypeError, InvalidOperation):
        return value

    negative = amount < 0
    absolute = abs(amount)
    if absolute >= CRORE:
        scaled = (absolute / CRORE).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        text = f"{RUPEE}{_trim_zero_fraction(scaled)} Cr"
    elif absolute >= LAKH:
        scaled = (absolute / LAKH).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        text = f"{RUPEE}{_trim_zero_fraction(scaled)} L"
    else:
        text = f"{RUPEE}{indian_number(absolute, 0)}"
    return _wrap_negative(text, negative)


def _trim_zero_fraction(value: Decimal) -> str:
    text = f"{value:.2f}"
    return text[:-3] if text.endswith('.00') else text


@register.filter(name='accounting')
def accounting(value):
    """
    Accounting style: negatives in parentheses, no minus sign.

    Usage: {{ balance|accounting }}
    Result: (1,234.00)
    """
    try:
        if value is None:
            value = 0
        amount = _to_decimal(value)
    except (ValueError, TypeError, InvalidOperation):
        return value
    return _wrap_negative(indian_number(abs(amount)), amount < 0)


@register.filter(name='get_item')
def get_item(dictionary, key):
    """
    Access dictionary item by key in templates.

    Usage: {{ period_amounts|get_item:period_key }}
    """
    if dictionary is None:
        return None
    return dictionary.get(key)
