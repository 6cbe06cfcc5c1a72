"""
Export report cards from a results workbook without starting the web server.

Usage (all students, zip archive):
  python scripts/export_reports.py uploads/result.xlsx --output Student_Reports.zip

Usage (one student, PDF):
  python scripts/export_reports.py uploads/result.xlsx --roll 242009695 --output report.pdf
"""

import sys
import os
import argparse

# Ensure project root is on sys.path when running as a script
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from config import Config
from datastore import ResultsStore, ResultsLoadError
from services.bulk_export_service import BulkExportService
from services.reporting_service import ReportingService


def print_progress(current, total, status):
    print(f"[{current}/{total}] {status}")


def export_one(store, roll_number, output, school_name, academic_session):
    report = store.build_report(roll_number)
    if report is None:
        raise SystemExit(f"No records found for Roll No {roll_number}")

    pdf_bytes = ReportingService.generate_report_card_pdf(
        report, school_name=school_name, academic_session=academic_session
    )
    if not pdf_bytes:
        raise SystemExit("PDF generation failed")

    output = output or ReportingService.report_filename(report)
    with open(output, 'wb') as f:
        f.write(pdf_bytes)
    print(f"Wrote {output}")


def export_all(store, output, school_name, academic_session):
    zip_bytes, summary = BulkExportService.build_archive(
        store.index,
        school_name=school_name,
        academic_session=academic_session,
        progress=print_progress,
    )
    output = output or Config.ARCHIVE_NAME
    with open(output, 'wb') as f:
        f.write(zip_bytes)
    print(f"Wrote {output}: {len(summary['processed'])} reports, {len(summary['skipped'])} skipped")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Export student report cards")
    parser.add_argument('workbook', nargs='?', default=Config.RESULTS_WORKBOOK, help="Results workbook (.xlsx)")
    parser.add_argument('--roll', help="Export only this roll number as a PDF")
    parser.add_argument('--output', '-o', help="Output file path")
    parser.add_argument('--school-name', default=Config.SCHOOL_NAME)
    parser.add_argument('--session', default=Config.ACADEMIC_SESSION, help="Academic session shown on the card")
    args = parser.parse_args(argv)

    store = ResultsStore()
    try:
        row_count = store.load_workbook(args.workbook)
    except ResultsLoadError as e:
        raise SystemExit(str(e))
    print(f"Loaded {row_count} rows for {len(store.roll_numbers())} students")

    if args.roll:
        export_one(store, args.roll, args.output, args.school_name, args.session)
    else:
        export_all(store, args.output, args.school_name, args.session)


if __name__ == '__main__':
    main()
