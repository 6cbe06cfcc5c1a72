"""
Report builder for the PTM Report Card Portal
Turns one student's workbook rows into the Report shown on the report card
"""

import re

from models.student import Profile
from models.report import SubjectScore, TestGroup, HistoryPoint, MajorExamPoint, Report
from utils.constants import (
    COL_TEST_TYPE, COL_TEST_NAME, COL_TEST_DATE, SUBJECT_MAP, MAJOR_EXAM_TYPES,
    CATEGORY_ST_OT, CATEGORY_PART_TEST, CATEGORY_MAJOR, PERFORMANCE_CATEGORIES,
    NOT_ATTEMPTED, PERCENTAGE_NA, max_marks_column
)
from utils.dates import parse_excel_date, sort_key
from utils.numbers import is_number, round_half_up

RE_HALF_YEARLY_MARKERS = ('re half yearly', 're-half yearly')
PRE_BOARD_PATTERN = re.compile(r'pre\s*-?\s*board\s*-?\s*(\d+)', re.IGNORECASE)


class ReportBuilder:
    """Classification and aggregation of raw test rows"""

    # ------------------------- Classification -------------------------
    @staticmethod
    def raw_test_type(row):
        """Trimmed 'Test Type' label, 'Other' when the cell is empty"""
        value = row.get(COL_TEST_TYPE)
        if value is None or value == '':
            return 'Other'
        return str(value).strip()

    @staticmethod
    def test_name(row):
        value = row.get(COL_TEST_NAME)
        return str(value).strip() if value is not None else ''

    @staticmethod
    def normalize_half_yearly(test_type, test_name):
        """Re-Half Yearly is detected from the test name and wins over the raw label."""
        lowered_name = test_name.lower()
        if any(marker in lowered_name for marker in RE_HALF_YEARLY_MARKERS):
            return 'Re-Half Yearly'
        if test_type.lower() == 'half yearly':
            return 'Half Yearly'
        return test_type

    @staticmethod
    def pre_board_number(test_name):
        """'Pre-Board-2' -> '2', None when the name carries no pre-board number"""
        match = PRE_BOARD_PATTERN.search(test_name or '')
        return match.group(1) if match else None

    @staticmethod
    def classify_test_type(row):
        """Final exam type of a row used for grouping test cards"""
        test_name = ReportBuilder.test_name(row)
        test_type = ReportBuilder.normalize_half_yearly(ReportBuilder.raw_test_type(row), test_name)
        number = ReportBuilder.pre_board_number(test_name)
        if number is not None:
            test_type = f'Pre Board {number}'
        return test_type

    @staticmethod
    def is_st_ot_type(test_type):
        # Case-sensitive on purpose: 'ST', 'OT' and 'AT' are sheet abbreviations
        return 'ST' in test_type or 'OT' in test_type or 'AT' in test_type

    @staticmethod
    def is_part_test_type(test_type):
        return 'part test' in test_type.lower()

    @staticmethod
    def is_individual_test(test_type):
        """ST/OT and part tests get one card per sitting instead of one per type"""
        return ReportBuilder.is_st_ot_type(test_type) or ReportBuilder.is_part_test_type(test_type)

    @staticmethod
    def normalize_major_type(row):
        """Major exam category of a row, or None when it is not a major exam"""
        test_type = ReportBuilder.raw_test_type(row)
        test_name = ReportBuilder.test_name(row)

        lowered_type = test_type.lower()
        number = ReportBuilder.pre_board_number(test_name)
        if any(marker in test_name.lower() for marker in RE_HALF_YEARLY_MARKERS):
            normalized = 'Re-Half Yearly'
        elif lowered_type == 'half yearly':
            normalized = 'Half Yearly'
        elif 'annual' in lowered_type:
            normalized = 'Annual Exam'
        elif number is not None:
            normalized = f'Pre Board {number}'
        elif 'pre board' in lowered_type or 'pre board' in test_name.lower():
            normalized = 'Pre Board'
        else:
            normalized = test_type

        if normalized in MAJOR_EXAM_TYPES or normalized.startswith('Pre Board'):
            return normalized
        return None

    # ------------------------- Build -------------------------
    @staticmethod
    def build(rows):
        """Build the Report for one student's rows, None when there are none"""
        rows = list(rows or [])
        if not rows:
            return None

        history = ReportBuilder.build_history(rows)
        st_ot = [point for point in history if ReportBuilder.is_individual_test(point.type_tag)]

        return Report(
            profile=Profile.from_row(rows[0]),
            tests=ReportBuilder.build_test_groups(rows),
            history=history,
            st_ot=st_ot,
            major=ReportBuilder.build_major_exams(rows),
            subject_performance=ReportBuilder.build_subject_performance(rows),
        )

    @staticmethod
    def build_test_groups(rows):
        """Group rows into test cards and compute their totals"""
        groups = {}

        for index, row in enumerate(rows):
            test_type = ReportBuilder.classify_test_type(row)
            test_name = ReportBuilder.test_name(row)
            raw_date = row.get(COL_TEST_DATE)

            if ReportBuilder.is_individual_test(test_type):
                # Same-named tests on different dates stay separate
                key = f'STOT_{test_name}_{raw_date}_{index}'
                consolidated = False
            else:
                key = test_type
                consolidated = True

            group = groups.get(key)
            if group is None:
                group = groups[key] = {
                    'id': key,
                    'type': test_type,
                    'test_name': test_name,
                    'raw_date': raw_date,
                    'is_consolidated': consolidated,
                    'subjects': [],
                    'total_obtained': 0,
                    'total_max': 0,
                    'max_count': 0,
                    'attempted_count': 0,
                }

            for code, subject_name in SUBJECT_MAP.items():
                obtained = row.get(code)
                max_marks = row.get(max_marks_column(code))
                if obtained is None and max_marks is None:
                    continue

                group['subjects'].append(SubjectScore(
                    name=subject_name,
                    obtained=obtained if obtained is not None else NOT_ATTEMPTED,
                    max_marks=max_marks if max_marks is not None else NOT_ATTEMPTED,
                    test_name=row.get(COL_TEST_NAME),
                ))

                # Maximum marks count whether or not the subject was attempted
                if is_number(max_marks) and max_marks > 0:
                    group['total_max'] += max_marks
                    group['max_count'] += 1
                    if is_number(obtained):
                        group['total_obtained'] += obtained
                        group['attempted_count'] += 1

        tests = []
        for group in groups.values():
            if group['total_max'] <= 0:
                continue
            tests.append(ReportBuilder._finish_group(group))
        return tests

    @staticmethod
    def _finish_group(group):
        complete = group['max_count'] > 0 and group['attempted_count'] == group['max_count']
        if complete:
            percentage = round_half_up(group['total_obtained'] / group['total_max'] * 100, 2)
        else:
            percentage = PERCENTAGE_NA

        consolidated = group['is_consolidated']
        return TestGroup(
            group_id=group['id'],
            type_tag=group['type'],
            display_title=f"{group['type']} Examination" if consolidated else group['test_name'],
            is_consolidated=consolidated,
            date=None if consolidated else parse_excel_date(group['raw_date']),
            subjects=group['subjects'],
            total_obtained=round_half_up(group['total_obtained'], 2),
            total_max=group['total_max'],
            percentage=percentage,
        )

    @staticmethod
    def build_history(rows):
        """One percentage point per row, oldest first"""
        history = []
        for row in rows:
            test_name = ReportBuilder.test_name(row)
            test_type = ReportBuilder.normalize_half_yearly(ReportBuilder.raw_test_type(row), test_name)

            row_obtained = 0
            row_max = 0
            for code in SUBJECT_MAP:
                obtained = row.get(code)
                max_marks = row.get(max_marks_column(code))
                if is_number(obtained):
                    row_obtained += obtained
                    if is_number(max_marks):
                        row_max += max_marks

            # No attempted subject with maximum marks on this row
            if row_max == 0:
                continue

            raw_date = row.get(COL_TEST_DATE)
            display_date = parse_excel_date(raw_date)
            if not display_date:
                continue

            history.append(HistoryPoint(
                date=display_date,
                raw_date=raw_date,
                type_tag=test_type,
                test_name=test_name,
                percentage=round_half_up(row_obtained / row_max * 100, 2),
            ))

        return sorted(history, key=lambda point: sort_key(point.raw_date))

    @staticmethod
    def build_major_exams(rows):
        """One aggregated point per major exam category across all rows"""
        aggregates = {}
        for row in rows:
            major_type = ReportBuilder.normalize_major_type(row)
            if major_type is None:
                continue

            aggregate = aggregates.setdefault(major_type, {
                'total_obtained': 0,
                'total_max': 0,
                'raw_date': row.get(COL_TEST_DATE),
            })
            for code in SUBJECT_MAP:
                obtained = row.get(code)
                max_marks = row.get(max_marks_column(code))
                if is_number(max_marks) and max_marks > 0:
                    aggregate['total_max'] += max_marks
                    if is_number(obtained):
                        aggregate['total_obtained'] += obtained

        points = [
            MajorExamPoint(
                type_tag=major_type,
                date=parse_excel_date(aggregate['raw_date']),
                raw_date=aggregate['raw_date'],
                percentage=round_half_up(aggregate['total_obtained'] / aggregate['total_max'] * 100, 2),
            )
            for major_type, aggregate in aggregates.items()
            if aggregate['total_max'] > 0
        ]
        return sorted(points, key=lambda point: sort_key(point.raw_date))

    @staticmethod
    def performance_category(row):
        """ST/OT, Part Test or Major Exams; None for rows outside all three"""
        test_type = ReportBuilder.raw_test_type(row)
        if ReportBuilder.is_st_ot_type(test_type):
            return CATEGORY_ST_OT
        if ReportBuilder.is_part_test_type(test_type):
            return CATEGORY_PART_TEST
        if ReportBuilder.normalize_major_type(row) is not None:
            return CATEGORY_MAJOR
        return None

    @staticmethod
    def build_subject_performance(rows):
        """Subject averages per test category"""
        stats = {category: {} for category in PERFORMANCE_CATEGORIES}
        for row in rows:
            category = ReportBuilder.performance_category(row)
            if category is None:
                continue

            for code, subject_name in SUBJECT_MAP.items():
                obtained = row.get(code)
                max_marks = row.get(max_marks_column(code))
                if is_number(obtained) and is_number(max_marks) and max_marks > 0:
                    totals = stats[category].setdefault(subject_name, {'obtained': 0, 'max': 0})
                    totals['obtained'] += obtained
                    totals['max'] += max_marks

        performance = {}
        for category in PERFORMANCE_CATEGORIES:
            subjects = stats[category]
            if not subjects:
                continue
            performance[category] = [
                {'subject': name, 'percentage': round_half_up(totals['obtained'] / totals['max'] * 100, 1)}
                for name, totals in subjects.items()
            ]
        return performance
