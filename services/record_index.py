"""
Record index for the PTM Report Card Portal
Groups workbook rows by roll number
"""

from utils.constants import COL_ROLL_NO
from utils.validators import normalize_roll_number


def index_by_roll(rows):
    """Map each roll number key to that student's rows, keeping input order.

    Rows without a roll number are not indexed.
    """
    index = {}
    for row in rows or []:
        key = normalize_roll_number(row.get(COL_ROLL_NO))
        if key is None:
            continue
        index.setdefault(key, []).append(row)
    return index


class RecordIndex:
    """Lookup of raw rows by roll number"""

    def __init__(self, rows=None):
        self._index = index_by_roll(rows)

    def rows_for(self, roll_number):
        """Rows for a roll number (numeric or string), empty list when unknown"""
        key = normalize_roll_number(roll_number)
        if key is None:
            return []
        return list(self._index.get(key, []))

    def roll_numbers(self):
        """Indexed roll number keys in first-seen order"""
        return list(self._index.keys())

    def __contains__(self, roll_number):
        return normalize_roll_number(roll_number) in self._index

    def __len__(self):
        return len(self._index)
