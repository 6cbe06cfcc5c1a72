"""
Workbook service for the PTM Report Card Portal
Reads the results workbook into one dict per row
"""

from datetime import date, datetime
from io import BytesIO

import openpyxl
from openpyxl.utils.datetime import to_excel


class WorkbookError(Exception):
    """Raised when a results workbook cannot be read"""
    pass


class WorkbookService:
    """Service for loading exam results from Excel"""

    @staticmethod
    def _cell_value(value):
        """Normalize one cell; dates go back to day serials, blanks to None."""
        if isinstance(value, (datetime, date)):
            return to_excel(value)
        if isinstance(value, str) and value == '':
            return None
        return value

    @staticmethod
    def _header(value):
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def rows_from_worksheet(ws):
        """Header row + data rows -> list of dicts with empty cells left out"""
        rows_iter = ws.iter_rows(values_only=True)
        try:
            header_row = next(rows_iter)
        except StopIteration:
            return []

        headers = [WorkbookService._header(value) for value in header_row]
        records = []
        for values in rows_iter:
            record = {}
            for header, value in zip(headers, values):
                if header is None:
                    continue
                value = WorkbookService._cell_value(value)
                if value is not None:
                    record[header] = value
            if record:
                records.append(record)
        return records

    @staticmethod
    def load_rows(source):
        """Load the first worksheet of an .xlsx file.

        source may be a path, raw bytes or a binary file object.
        """
        if isinstance(source, (bytes, bytearray)):
            source = BytesIO(source)
        try:
            wb = openpyxl.load_workbook(filename=source, read_only=True, data_only=True)
        except FileNotFoundError as e:
            raise WorkbookError(f"Results workbook not found: {e}") from e
        except Exception as e:
            raise WorkbookError(f"Could not read results workbook: {e}") from e

        try:
            ws = wb.worksheets[0]
            return WorkbookService.rows_from_worksheet(ws)
        finally:
            wb.close()
