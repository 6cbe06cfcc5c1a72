"""
Bulk export service for the PTM Report Card Portal
Bundles every student's report card PDF into one zip archive
"""

import zipfile
from io import BytesIO

from services.report_builder import ReportBuilder
from services.reporting_service import ReportingService

ARCHIVE_FOLDER = 'Student_Reports'


class BulkExportService:
    """Service for exporting all report cards at once"""

    @staticmethod
    def build_archive(index, school_name=None, academic_session=None, progress=None, folder=ARCHIVE_FOLDER):
        """Render every student in the index and zip the PDFs.

        Students are rendered one after another; each PDF is finished and
        written before the next student's rows are read.

        progress, when given, is called as progress(current, total, status).
        Returns (zip_bytes, summary) where summary lists processed and skipped
        roll numbers.
        """
        roll_numbers = index.roll_numbers()
        total = len(roll_numbers)
        summary = {'total': total, 'processed': [], 'skipped': []}

        buffer = BytesIO()
        with zipfile.ZipFile(buffer, 'w', compression=zipfile.ZIP_DEFLATED) as archive:
            for position, roll_number in enumerate(roll_numbers, 1):
                if progress:
                    progress(position, total, f'Processing Roll: {roll_number} ({position}/{total})')

                report = ReportBuilder.build(index.rows_for(roll_number))
                if report is None:
                    summary['skipped'].append(roll_number)
                    continue

                pdf_bytes = ReportingService.generate_report_card_pdf(
                    report, school_name=school_name, academic_session=academic_session
                )
                if not pdf_bytes:
                    print(f"Error generating report card for roll {roll_number}; skipped")
                    summary['skipped'].append(roll_number)
                    continue

                archive.writestr(f'{folder}/{ReportingService.report_filename(report)}', pdf_bytes)
                summary['processed'].append(roll_number)

            if progress:
                progress(total, total, 'Zipping files...')

        zip_bytes = buffer.getvalue()
        buffer.close()
        return zip_bytes, summary
