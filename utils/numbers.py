"""
Number helpers for marks and percentages
"""

from decimal import Decimal, ROUND_HALF_UP


def is_number(value):
    """True for int/float cell values. Booleans and numeric strings are not marks."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def round_half_up(value, places=2):
    """Round halves away from zero on the exact binary value: 81.25 -> 81.3 at one place."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_mark(value):
    """34.0 -> '34', 34.567 -> '34.57'; absence markers such as '-' or 'AB' pass through."""
    if value is None:
        return ''
    if not is_number(value):
        return value
    if float(value).is_integer():
        return str(int(value))
    return ('%.2f' % round_half_up(value, 2)).rstrip('0').rstrip('.')


def format_percentage(value, places=2):
    """75.0 -> '75.00%'. 'NA' and other text is returned unchanged."""
    if not is_number(value):
        return value
    return f'{round_half_up(value, places):.{places}f}%'
