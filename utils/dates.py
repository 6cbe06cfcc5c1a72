"""
Spreadsheet date helpers
"""

import math
from datetime import date, timedelta

# Day serial of 1970-01-01 in the 1900 date system
UNIX_EPOCH_SERIAL = 25569

MONTH_ABBREVIATIONS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
                       'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')


def to_serial(value):
    """Return value as a float day serial, or None if it is not one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        serial = float(value)
    else:
        try:
            serial = float(str(value).strip())
        except ValueError:
            return None
    if math.isnan(serial) or math.isinf(serial):
        return None
    return serial


def serial_to_date(value):
    """Convert a day serial to a date. The time-of-day fraction is dropped."""
    serial = to_serial(value)
    if not serial:
        return None
    try:
        return date(1970, 1, 1) + timedelta(days=math.floor(serial - UNIX_EPOCH_SERIAL))
    except OverflowError:
        return None


def parse_excel_date(value):
    """Format a day serial for display, e.g. 45292 -> '1 Jan 2024'.

    Returns None for empty or unparseable values.
    """
    day = serial_to_date(value)
    if day is None:
        return None
    return f'{day.day} {MONTH_ABBREVIATIONS[day.month - 1]} {day.year}'


def sort_key(value):
    """Sort key for raw date values; missing or non-numeric dates sort first."""
    serial = to_serial(value)
    return serial if serial is not None else 0
