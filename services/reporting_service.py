"""
Reporting service for the PTM Report Card Portal
Renders a student's report card as a PDF
"""

from io import BytesIO
from xml.sax.saxutils import escape as xml_escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, Image, KeepTogether

from services.chart_service import ChartService
from utils.numbers import format_mark, format_percentage
from utils.validators import normalize_roll_number

DEFAULT_SCHOOL_NAME = 'Foundation School'
DEFAULT_ACADEMIC_SESSION = '2025-26'


class ReportingService:
    """Service for generating report card PDFs"""

    @staticmethod
    def _get_paragraph_style():
        """Return a compact cell Paragraph style to enable auto word-wrap in table cells."""
        styles = getSampleStyleSheet()
        return ParagraphStyle(
            'Cell',
            parent=styles['Normal'],
            fontSize=9,
            leading=11,
            spaceAfter=0,
            spaceBefore=0,
        )

    @staticmethod
    def _get_header_paragraph_style():
        styles = getSampleStyleSheet()
        return ParagraphStyle(
            'HeaderCell',
            parent=styles['Normal'],
            fontSize=9,
            leading=11,
            textColor=colors.white,
            spaceAfter=0,
            spaceBefore=0,
        )

    @staticmethod
    def _to_paragraph(value):
        """Convert any value to a Paragraph so ReportLab wraps text within cell width."""
        if value is None:
            return Paragraph('', ReportingService._get_paragraph_style())
        text = xml_escape(str(value)).replace('\n', '<br/>')
        return Paragraph(text, ReportingService._get_paragraph_style())

    @staticmethod
    def _wrap_table_data(rows, skip_header=True, header_text_white=False, no_wrap_cols=None):
        """Map table cells to Paragraphs for word-wrap.
        If skip_header=True, the first row is left as-is so TableStyle header
        text color/background rules still apply.
        """
        if not rows:
            return rows
        no_wrap_set = set(no_wrap_cols or [])
        start_idx = 1 if skip_header and len(rows) > 0 else 0
        wrapped_rows = []
        if start_idx == 1:
            if header_text_white:
                wrapped_rows.append([Paragraph(xml_escape(str(c)), ReportingService._get_header_paragraph_style())
                                     for c in rows[0]])
            else:
                wrapped_rows.append(rows[0])
        for row in rows[start_idx:]:
            wrapped = []
            for idx, cell in enumerate(row):
                if idx in no_wrap_set:
                    wrapped.append(xml_escape(str(cell)) if cell is not None else '')
                else:
                    wrapped.append(ReportingService._to_paragraph(cell))
            wrapped_rows.append(wrapped)
        return wrapped_rows

    @staticmethod
    def _calc_colwidths_from_fracs(total_width, fracs):
        safe_fracs = fracs or []
        s = float(sum(safe_fracs)) or 1.0
        normalized = [f / s for f in safe_fracs]
        return [total_width * f for f in normalized]

    @staticmethod
    def _build_table(rows, page_width, col_fracs, *, no_wrap_cols=None, center_cols=None,
                     header_bg=colors.black, footer_rows=0):
        """Build a standardized table with consistent styling across PDFs.
        - rows: 2D list with header at index 0
        - col_fracs: fractions for each column width
        - center_cols: set of indices to center-align in body
        - footer_rows: trailing total rows shaded light grey
        """
        wrapped = ReportingService._wrap_table_data(rows, skip_header=True, header_text_white=True,
                                                    no_wrap_cols=no_wrap_cols or set())
        colwidths = ReportingService._calc_colwidths_from_fracs(page_width, col_fracs)
        tbl = Table(wrapped, repeatRows=1, colWidths=colwidths)
        base_style = [
            ('BOX', (0, 0), (-1, -1), 0.5, colors.grey),
            ('INNERGRID', (0, 0), (-1, -1), 0.25, colors.lightgrey),
            ('BACKGROUND', (0, 0), (-1, 0), header_bg),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('ALIGN', (0, 0), (-1, 0), 'CENTER'),
            ('VALIGN', (0, 0), (-1, 0), 'MIDDLE'),
            ('VALIGN', (0, 1), (-1, -1), 'MIDDLE'),
            ('LEFTPADDING', (0, 1), (-1, -1), 3),
            ('RIGHTPADDING', (0, 1), (-1, -1), 3),
            ('TOPPADDING', (0, 1), (-1, -1), 2),
            ('BOTTOMPADDING', (0, 1), (-1, -1), 2),
        ]
        if center_cols:
            min_idx = min(center_cols)
            max_idx = max(center_cols)
            base_style.append(('ALIGN', (min_idx, 1), (max_idx, -1), 'CENTER'))
        if footer_rows:
            base_style.append(('BACKGROUND', (0, -footer_rows), (-1, -1), colors.whitesmoke))
        tbl.setStyle(TableStyle(base_style))
        return tbl

    @staticmethod
    def _chart_image(png_bytes, max_width, max_height):
        img = Image(BytesIO(png_bytes))
        img._restrictSize(max_width, max_height)
        return img

    @staticmethod
    def _test_group_rows(group):
        rows = [['Subject', 'Test', 'Marks', 'MM']]
        for subject in group.subjects:
            rows.append([
                subject.name,
                subject.test_name if group.is_consolidated else '',
                format_mark(subject.obtained),
                format_mark(subject.max_marks),
            ])
        rows.append([
            'Total',
            format_percentage(group.percentage),
            format_mark(group.total_obtained),
            format_mark(group.total_max),
        ])
        return rows

    # ======================== PDF GENERATION ========================
    @staticmethod
    def generate_report_card_pdf(report, school_name=None, academic_session=None, charts=None):
        """Generate the report card PDF for one student and return bytes.

        charts may be passed in when they were already rendered for the web view.
        """
        try:
            buffer = BytesIO()
            doc = SimpleDocTemplate(buffer, pagesize=A4, leftMargin=15*mm, rightMargin=15*mm,
                                    topMargin=15*mm, bottomMargin=15*mm,
                                    title=f'Result Card - {report.profile.display_name}')
            elements = []
            styles = getSampleStyleSheet()
            title_center = ParagraphStyle('TitleCenter', parent=styles['Title'], alignment=1, fontSize=16, leading=19)
            subtitle_center = ParagraphStyle('SubtitleCenter', parent=styles['Normal'], alignment=1)
            header_title = ParagraphStyle('HeaderTitle', parent=styles['Title'], alignment=0, fontSize=15,
                                          leading=18, textColor=colors.white)
            note_style = ParagraphStyle('Note', parent=styles['Normal'], fontSize=8, textColor=colors.grey)
            page_width = A4[0] - (15*mm + 15*mm)

            # School header bar
            header_table = Table([[Paragraph(xml_escape((school_name or DEFAULT_SCHOOL_NAME).upper()), header_title)]],
                                 colWidths=[page_width])
            header_table.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (-1, -1), colors.HexColor('#334155')),
                ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
                ('TOPPADDING', (0, 0), (-1, -1), 6),
                ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
            ]))
            elements.append(header_table)
            elements.append(Spacer(1, 6))
            elements.append(Paragraph('Result Card', title_center))
            elements.append(Paragraph(f'Academic Session: {xml_escape(academic_session or DEFAULT_ACADEMIC_SESSION)}',
                                      subtitle_center))
            elements.append(Spacer(1, 8))

            # Student info table
            p = report.profile
            data = [
                ['Student Name', p.name or '', 'Roll No.', p.roll_no if p.roll_no is not None else ''],
                ['Class', p.class_name if p.class_name is not None else '', 'Batch', p.batch or ''],
            ]
            info_table = Table([[ReportingService._to_paragraph(c) for c in r] for r in data],
                               colWidths=ReportingService._calc_colwidths_from_fracs(page_width, [0.18, 0.37, 0.15, 0.30]))
            info_table.setStyle(TableStyle([
                ('BOX', (0, 0), (-1, -1), 0.5, colors.grey),
                ('INNERGRID', (0, 0), (-1, -1), 0.25, colors.lightgrey),
                ('BACKGROUND', (0, 0), (0, -1), colors.whitesmoke),
                ('BACKGROUND', (2, 0), (2, -1), colors.whitesmoke),
                ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ]))
            elements.extend([info_table, Spacer(1, 10)])

            # Trend charts
            if charts is None:
                charts = ChartService.report_charts(report)
            trend_images = [ReportingService._chart_image(charts[key], page_width / 2 - 3*mm, 70*mm)
                            for key in ('st_ot', 'major') if charts.get(key)]
            if trend_images:
                elements.append(Paragraph('Performance Trend', styles['Heading2']))
                if len(trend_images) == 2:
                    chart_table = Table([trend_images], colWidths=[page_width / 2, page_width / 2])
                else:
                    trend_images[0]._restrictSize(page_width, 80*mm)
                    chart_table = Table([trend_images], colWidths=[page_width])
                chart_table.setStyle(TableStyle([('VALIGN', (0, 0), (-1, -1), 'TOP'),
                                                 ('ALIGN', (0, 0), (-1, -1), 'CENTER')]))
                elements.extend([chart_table, Spacer(1, 10)])

            # Test cards
            elements.append(Paragraph('Detailed Performance Record', styles['Heading2']))
            if not report.tests:
                elements.append(Paragraph('No test records available', styles['Normal']))
            for group in report.tests:
                heading = xml_escape(group.display_title or '')
                if not group.is_consolidated and group.date:
                    heading += f' <font size="8" color="grey">({xml_escape(group.date)})</font>'
                block = [
                    Paragraph(f'<b>{heading}</b> <font size="8" color="grey">[{xml_escape(group.type_tag)}]</font>',
                              styles['Normal']),
                    Spacer(1, 3),
                    ReportingService._build_table(
                        ReportingService._test_group_rows(group),
                        page_width,
                        [0.34, 0.36, 0.15, 0.15],
                        center_cols={2, 3},
                        footer_rows=1,
                    ),
                ]
                if not group.is_complete:
                    block.append(Paragraph('NA: not all subjects were attempted in this test.', note_style))
                block.append(Spacer(1, 8))
                elements.append(KeepTogether(block))

            # Subject-wise performance
            performance = report.ordered_subject_performance()
            if performance:
                elements.append(Paragraph('Subject-wise Performance Analysis', styles['Heading2']))
                for category, subjects in performance:
                    rows = [['Subject', f'{category} Average']]
                    for entry in subjects:
                        rows.append([entry['subject'], f"{entry['percentage']}%"])
                    elements.append(KeepTogether([
                        ReportingService._build_table(rows, page_width, [0.6, 0.4], center_cols={1}),
                        Spacer(1, 8),
                    ]))

            doc.build(elements)
            pdf_bytes = buffer.getvalue()
            buffer.close()
            return pdf_bytes
        except Exception as e:
            print(f"Error generating report card PDF: {e}")
            return None

    @staticmethod
    def report_filename(report, extension='pdf'):
        """'<name>_<roll>.pdf' as used for downloads and archive entries"""
        name = (report.profile.display_name or 'Student').strip().replace('/', '-')
        return f'{name}_{normalize_roll_number(report.profile.roll_no)}.{extension}'
