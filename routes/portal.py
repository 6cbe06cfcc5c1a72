"""
Portal routes for the PTM Report Card Portal
Search by roll number, report card views and downloads
"""

import os
from io import BytesIO

from flask import Blueprint, render_template, request, redirect, url_for, flash, jsonify, make_response, current_app
from werkzeug.utils import secure_filename

from datastore import results_store, ResultsLoadError
from services.chart_service import ChartService
from services.reporting_service import ReportingService
from services.excel_export_service import ExcelExportService
from services.bulk_export_service import BulkExportService
from utils.validators import validate_roll_number, validate_results_upload

portal_bp = Blueprint('portal', __name__)


def _load_report(roll_number):
    """(report, error message); report is None when not found or invalid"""
    is_valid, message = validate_roll_number(roll_number)
    if not is_valid:
        return None, message
    report = results_store.build_report(roll_number.strip())
    if report is None:
        return None, f'No records found for Roll No {roll_number}'
    return report, None


@portal_bp.route('/')
def index():
    """Search page"""
    return render_template('portal/index.html',
                           is_loaded=results_store.is_loaded,
                           student_count=len(results_store.roll_numbers()))


@portal_bp.route('/report')
def report_view():
    """Report card for the searched roll number"""
    roll_number = request.args.get('roll', '').strip()
    if not roll_number:
        return redirect(url_for('portal.index'))

    is_valid, message = validate_roll_number(roll_number)
    if not is_valid:
        flash(message, 'error')
        return redirect(url_for('portal.index'))

    try:
        report = results_store.build_report(roll_number)
        if report is None:
            return render_template('portal/index.html',
                                   is_loaded=results_store.is_loaded,
                                   student_count=len(results_store.roll_numbers()),
                                   not_found=roll_number), 404

        charts = {key: ChartService.to_data_uri(png)
                  for key, png in ChartService.report_charts(report).items()}
        return render_template('portal/report.html', report=report, charts=charts, roll_number=roll_number)
    except Exception as e:
        flash(f'Error generating report: {str(e)}', 'error')
        return redirect(url_for('portal.index'))


@portal_bp.route('/report/<roll_number>/pdf')
def export_report_pdf(roll_number):
    """Download the report card as PDF"""
    try:
        report, message = _load_report(roll_number)
        if not report:
            flash(message, 'error')
            return redirect(url_for('portal.index'))

        pdf_bytes = ReportingService.generate_report_card_pdf(
            report,
            school_name=current_app.config.get('SCHOOL_NAME'),
            academic_session=current_app.config.get('ACADEMIC_SESSION'),
        )
        if not pdf_bytes:
            flash('Error generating PDF file', 'error')
            return redirect(url_for('portal.report_view', roll=roll_number))

        response = make_response(pdf_bytes)
        response.headers['Content-Type'] = 'application/pdf'
        response.headers['Content-Disposition'] = f'attachment; filename="{ReportingService.report_filename(report)}"'
        return response
    except Exception as e:
        flash(f'Error exporting PDF: {str(e)}', 'error')
        return redirect(url_for('portal.index'))


@portal_bp.route('/report/<roll_number>/excel')
def export_report_excel(roll_number):
    """Download the report as an Excel workbook"""
    try:
        report, message = _load_report(roll_number)
        if not report:
            flash(message, 'error')
            return redirect(url_for('portal.index'))

        workbook = ExcelExportService.export_report(report)
        if not workbook:
            flash('Error generating Excel file', 'error')
            return redirect(url_for('portal.report_view', roll=roll_number))

        excel_data = ExcelExportService.workbook_to_bytes(workbook)

        response = make_response(excel_data)
        response.headers['Content-Type'] = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        response.headers['Content-Disposition'] = (
            f'attachment; filename="{ReportingService.report_filename(report, extension="xlsx")}"'
        )
        return response
    except Exception as e:
        flash(f'Error exporting Excel: {str(e)}', 'error')
        return redirect(url_for('portal.index'))


@portal_bp.route('/api/report/<roll_number>')
def report_api(roll_number):
    """Report model as JSON"""
    try:
        report, message = _load_report(roll_number)
        if not report:
            return jsonify({'success': False, 'message': message}), 404
        return jsonify({'success': True, 'report': report.to_dict()})
    except Exception as e:
        return jsonify({'success': False, 'message': f'Error generating report: {str(e)}'}), 500


@portal_bp.route('/reports/archive')
def export_archive():
    """Download every student's report card in one zip"""
    try:
        if not results_store.is_loaded:
            flash('No results loaded', 'error')
            return redirect(url_for('portal.index'))

        zip_bytes, summary = BulkExportService.build_archive(
            results_store.index,
            school_name=current_app.config.get('SCHOOL_NAME'),
            academic_session=current_app.config.get('ACADEMIC_SESSION'),
        )
        print(f"Report archive built: {len(summary['processed'])} of {summary['total']} students")

        response = make_response(zip_bytes)
        response.headers['Content-Type'] = 'application/zip'
        response.headers['Content-Disposition'] = f'attachment; filename={current_app.config["ARCHIVE_NAME"]}'
        return response
    except Exception as e:
        flash(f'Error generating report archive: {str(e)}', 'error')
        return redirect(url_for('portal.index'))


@portal_bp.route('/upload', methods=['POST'])
def upload_results():
    """Replace the loaded results with an uploaded workbook"""
    file = request.files.get('file')
    allowed = current_app.config['ALLOWED_EXTENSIONS']

    is_valid, message = validate_results_upload(file, allowed)
    if not is_valid:
        flash(message, 'error')
        return redirect(url_for('portal.index'))

    filename = secure_filename(file.filename)
    data = file.read()
    try:
        row_count = results_store.load_workbook(BytesIO(data), name=filename)
    except ResultsLoadError as e:
        flash(f'Error loading workbook: {str(e)}', 'error')
        return redirect(url_for('portal.index'))

    # Keep the upload as the workbook loaded on next start
    target = current_app.config.get('RESULTS_WORKBOOK')
    if target:
        try:
            os.makedirs(os.path.dirname(target) or '.', exist_ok=True)
            with open(target, 'wb') as f:
                f.write(data)
        except OSError as e:
            print(f"Error saving uploaded workbook: {e}")

    flash(f'Loaded {row_count} rows for {len(results_store.roll_numbers())} students from {filename}', 'success')
    return redirect(url_for('portal.index'))
