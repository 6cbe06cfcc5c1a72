"""
Results store for the PTM Report Card Portal
Holds the loaded workbook rows and the roll number index
"""

import os
from functools import wraps

from services.record_index import RecordIndex
from services.report_builder import ReportBuilder
from services.workbook_service import WorkbookService


class ResultsLoadError(Exception):
    """Custom exception for results loading"""
    pass


def handle_load_error(func):
    """Decorator to report any loading failure as ResultsLoadError"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ResultsLoadError:
            raise
        except Exception as e:
            raise ResultsLoadError(f"Loading results failed: {str(e)}")
    return wrapper


class ResultsStore:
    """In-memory copy of the results sheet"""

    def __init__(self):
        self.rows = []
        self.index = RecordIndex()
        self.source = None

    def init_app(self, app):
        """Load the configured workbook when it exists"""
        app.extensions['results_store'] = self
        path = app.config.get('RESULTS_WORKBOOK')
        if not path:
            return
        if not os.path.exists(path):
            print(f"Results workbook not found at {path}; upload one to start")
            return
        try:
            self.load_workbook(path)
            print(f"Loaded {len(self.rows)} result rows for {len(self.index)} students")
        except ResultsLoadError as e:
            print(f"Error loading results workbook: {e}")

    @handle_load_error
    def load_workbook(self, source, name=None):
        """Replace the loaded rows with the first sheet of a workbook"""
        rows = WorkbookService.load_rows(source)
        self.load_rows(rows, source=name or (source if isinstance(source, str) else None))
        return len(rows)

    def load_rows(self, rows, source=None):
        """Replace the loaded rows"""
        self.rows = list(rows or [])
        self.index = RecordIndex(self.rows)
        self.source = source

    def clear(self):
        self.load_rows([])

    @property
    def is_loaded(self):
        return bool(self.rows)

    def get_student_rows(self, roll_number):
        return self.index.rows_for(roll_number)

    def roll_numbers(self):
        return self.index.roll_numbers()

    def build_report(self, roll_number):
        """Report for one roll number, None when the student is not found"""
        return ReportBuilder.build(self.get_student_rows(roll_number))


# Initialize the process-wide store
results_store = ResultsStore()
