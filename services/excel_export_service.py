"""
Excel export service for the PTM Report Card Portal
Handles Excel export of a student's report
"""

import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter
from io import BytesIO

from utils.constants import PERCENTAGE_NA
from utils.numbers import is_number, round_half_up


class ExcelExportService:
    """Service for exporting reports to Excel"""

    @staticmethod
    def create_workbook():
        """Create a new workbook with default styling"""
        wb = openpyxl.Workbook()
        return wb

    @staticmethod
    def style_header_row(ws, row_num, columns):
        """Apply styling to header row"""
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="000000", end_color="000000", fill_type="solid")
        header_alignment = Alignment(horizontal="center", vertical="center")

        for col_num, header in enumerate(columns, 1):
            cell = ws.cell(row=row_num, column=col_num, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = header_alignment

    @staticmethod
    def auto_adjust_columns(ws):
        """Auto-adjust column widths"""
        for column in ws.columns:
            max_length = 0
            column_letter = get_column_letter(column[0].column)

            for cell in column:
                if cell.value is not None and len(str(cell.value)) > max_length:
                    max_length = len(str(cell.value))

            adjusted_width = min(max_length + 2, 50)
            ws.column_dimensions[column_letter].width = adjusted_width

    @staticmethod
    def format_number(value):
        """Marks as cell values: 32.0 -> 32, 32.431 -> 32.43; '-' and 'AB' stay text."""
        if not is_number(value):
            return value
        if float(value).is_integer():
            return int(value)
        return round_half_up(value, 2)

    @staticmethod
    def set_number(cell, value, align_right=False):
        """Set an integer/float number with alignment preferences."""
        cell.value = ExcelExportService.format_number(value)
        cell.alignment = Alignment(horizontal=("right" if align_right else "left"), vertical="center")
        return cell

    @staticmethod
    def set_percentage(cell, percent_0_to_100, align_left=True):
        """Write a numeric percentage (avoid text with green triangle). 'NA' stays text."""
        if not is_number(percent_0_to_100):
            cell.value = PERCENTAGE_NA if percent_0_to_100 == PERCENTAGE_NA else None
        else:
            # Convert 65.88 -> 0.6588 and apply percent format
            cell.value = float(percent_0_to_100) / 100.0
            if percent_0_to_100 == int(percent_0_to_100):
                cell.number_format = '0%'
            else:
                cell.number_format = '0.00%'
        cell.alignment = Alignment(horizontal=("left" if align_left else "right"), vertical="center")
        return cell

    @staticmethod
    def export_report(report):
        """Export a student report to Excel in a single sheet mirroring the PDF layout."""
        try:
            wb = ExcelExportService.create_workbook()
            ws = wb.active
            ws.title = "Report Card"

            profile = report.profile

            # Student info table (Field | Value)
            ExcelExportService.style_header_row(ws, 1, ['Field', 'Value'])
            ws.cell(row=2, column=1, value="Name")
            ws.cell(row=2, column=2, value=profile.name)
            ws.cell(row=3, column=1, value="Roll No.")
            ws.cell(row=3, column=2, value=profile.roll_no)
            ws.cell(row=4, column=1, value="Class")
            ws.cell(row=4, column=2, value=profile.class_name)
            ws.cell(row=5, column=1, value="Batch")
            ws.cell(row=5, column=2, value=profile.batch)
            row = 7

            # Test cards
            ws.cell(row=row, column=1, value="Detailed Performance Record").font = Font(bold=True)
            row += 1
            ExcelExportService.style_header_row(ws, row, ['Test', 'Type', 'Date', 'Subject', 'Marks', 'MM'])
            row += 1
            for group in report.tests:
                for subject in group.subjects:
                    ws.cell(row=row, column=1, value=group.display_title)
                    ws.cell(row=row, column=2, value=group.type_tag)
                    ws.cell(row=row, column=3, value=group.date)
                    ws.cell(row=row, column=4, value=subject.name)
                    ExcelExportService.set_number(ws.cell(row=row, column=5), subject.obtained, align_right=True)
                    ExcelExportService.set_number(ws.cell(row=row, column=6), subject.max_marks, align_right=True)
                    row += 1
                total_label = ws.cell(row=row, column=4, value="Total")
                total_label.font = Font(bold=True)
                ExcelExportService.set_number(ws.cell(row=row, column=5), group.total_obtained, align_right=True)
                ExcelExportService.set_number(ws.cell(row=row, column=6), group.total_max, align_right=True)
                ExcelExportService.set_percentage(ws.cell(row=row, column=7), group.percentage)
                row += 1
            if not report.tests:
                ws.cell(row=row, column=1, value="No data")
                row += 1

            # History
            row += 1
            ws.cell(row=row, column=1, value="Score History").font = Font(bold=True)
            row += 1
            ExcelExportService.style_header_row(ws, row, ['Date', 'Type', 'Test', 'Percent'])
            row += 1
            for point in report.history:
                ws.cell(row=row, column=1, value=point.date)
                ws.cell(row=row, column=2, value=point.type_tag)
                ws.cell(row=row, column=3, value=point.test_name)
                ExcelExportService.set_percentage(ws.cell(row=row, column=4), point.percentage)
                row += 1

            # Major exams
            if report.major:
                row += 1
                ws.cell(row=row, column=1, value="Major Exams").font = Font(bold=True)
                row += 1
                ExcelExportService.style_header_row(ws, row, ['Exam', 'Date', 'Percent'])
                row += 1
                for point in report.major:
                    ws.cell(row=row, column=1, value=point.type_tag)
                    ws.cell(row=row, column=2, value=point.date)
                    ExcelExportService.set_percentage(ws.cell(row=row, column=3), point.percentage)
                    row += 1

            # Subject-wise performance
            performance = report.ordered_subject_performance()
            if performance:
                row += 1
                ws.cell(row=row, column=1, value="Subject-wise Performance").font = Font(bold=True)
                row += 1
                ExcelExportService.style_header_row(ws, row, ['Category', 'Subject', 'Average'])
                row += 1
                for category, subjects in performance:
                    for entry in subjects:
                        ws.cell(row=row, column=1, value=category)
                        ws.cell(row=row, column=2, value=entry['subject'])
                        ExcelExportService.set_percentage(ws.cell(row=row, column=3), entry['percentage'])
                        row += 1

            ExcelExportService.auto_adjust_columns(ws)
            return wb
        except Exception as e:
            print(f"Error exporting student report: {e}")
            return None

    @staticmethod
    def workbook_to_bytes(workbook):
        """Convert workbook to bytes for download"""
        try:
            output = BytesIO()
            workbook.save(output)
            output.seek(0)
            return output.getvalue()
        except Exception as e:
            print(f"Error converting workbook to bytes: {e}")
            return None
