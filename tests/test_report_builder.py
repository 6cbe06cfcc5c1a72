"""
Unit tests for the report builder
"""

import unittest
from sample_data import SAMPLE_ROWS
from services.report_builder import ReportBuilder
from services.record_index import RecordIndex
from utils.constants import NOT_ATTEMPTED, PERCENTAGE_NA


def hy_row(**extra):
    row = {'Learner Name': 'Test Student', 'Roll No.': 1, 'Batch Name': 'B1', 'Class': '10',
           'Test Type': 'Half Yearly', 'Test Name': 'HY Exam', 'Test Date': 45600}
    row.update(extra)
    return row


class TestClassification(unittest.TestCase):

    def test_re_half_yearly_wins_over_label(self):
        """Re-Half Yearly in the test name overrides any type label"""
        for label in ('Half Yearly', 'half yearly', 'Annual Exam', 'Other'):
            for name in ('Re Half Yearly Exam', 'RE-HALF YEARLY', 'physics re half yearly'):
                row = {'Test Type': label, 'Test Name': name}
                self.assertEqual(ReportBuilder.classify_test_type(row), 'Re-Half Yearly')

    def test_half_yearly_normalized(self):
        row = {'Test Type': '  HALF YEARLY ', 'Test Name': 'HY'}
        self.assertEqual(ReportBuilder.classify_test_type(row), 'Half Yearly')

    def test_missing_type_defaults_to_other(self):
        self.assertEqual(ReportBuilder.classify_test_type({'Test Name': 'Something'}), 'Other')
        self.assertEqual(ReportBuilder.classify_test_type({'Test Type': '', 'Test Name': 'x'}), 'Other')

    def test_pre_board_numbering(self):
        """Separator and spacing variants all yield the same pre-board type"""
        for name in ('Pre Board 2', 'Pre-Board-2', 'pre  board 2', 'PRE - BOARD - 2', 'preboard2'):
            row = {'Test Type': 'Pre Board', 'Test Name': name}
            self.assertEqual(ReportBuilder.classify_test_type(row), 'Pre Board 2', name)

    def test_pre_board_number_overrides_half_yearly(self):
        row = {'Test Type': 'Half Yearly', 'Test Name': 'Pre Board 3'}
        self.assertEqual(ReportBuilder.classify_test_type(row), 'Pre Board 3')

    def test_individual_test_types(self):
        self.assertTrue(ReportBuilder.is_individual_test('ST/OT'))
        self.assertTrue(ReportBuilder.is_individual_test('OT'))
        self.assertTrue(ReportBuilder.is_individual_test('CAT'))
        self.assertTrue(ReportBuilder.is_individual_test('Part Test'))
        self.assertTrue(ReportBuilder.is_individual_test('part test 2'))
        self.assertFalse(ReportBuilder.is_individual_test('Half Yearly'))
        self.assertFalse(ReportBuilder.is_individual_test('Pre Board 2'))
        self.assertFalse(ReportBuilder.is_individual_test('Annual Exam'))
        # Abbreviation match is case-sensitive
        self.assertFalse(ReportBuilder.is_individual_test('st/ot'))

    def test_normalize_major_type(self):
        cases = [
            ({'Test Type': 'Half Yearly', 'Test Name': 'HY'}, 'Half Yearly'),
            ({'Test Type': 'Half Yearly', 'Test Name': 'Re-Half Yearly'}, 'Re-Half Yearly'),
            ({'Test Type': 'Annual Exam', 'Test Name': 'Final'}, 'Annual Exam'),
            ({'Test Type': 'annual', 'Test Name': 'Final'}, 'Annual Exam'),
            ({'Test Type': 'Pre Board', 'Test Name': 'Pre-Board-1'}, 'Pre Board 1'),
            ({'Test Type': 'Pre Board', 'Test Name': 'Mock'}, 'Pre Board'),
            ({'Test Type': 'Other', 'Test Name': 'pre board practice'}, 'Pre Board'),
            ({'Test Type': 'ST/OT', 'Test Name': 'ST-01'}, None),
            ({'Test Type': 'Other', 'Test Name': 'Quiz'}, None),
        ]
        for row, expected in cases:
            self.assertEqual(ReportBuilder.normalize_major_type(row), expected, row)


class TestTestGroups(unittest.TestCase):

    def test_empty_rows_yield_no_report(self):
        self.assertIsNone(ReportBuilder.build([]))
        self.assertIsNone(ReportBuilder.build(None))

    def test_complete_half_yearly_group(self):
        report = ReportBuilder.build([hy_row(**{'P': 80, 'P(MM)': 100, 'C': 70, 'C(MM)': 100})])

        self.assertEqual(len(report.tests), 1)
        group = report.tests[0]
        self.assertEqual(group.display_title, 'Half Yearly Examination')
        self.assertEqual(group.type_tag, 'Half Yearly')
        self.assertTrue(group.is_consolidated)
        self.assertIsNone(group.date)
        self.assertEqual(group.total_obtained, 150)
        self.assertEqual(group.total_max, 200)
        self.assertEqual(group.percentage, 75.0)
        self.assertEqual([s.name for s in group.subjects], ['Physics', 'Chemistry'])

    def test_missing_obtained_marks_group_incomplete(self):
        report = ReportBuilder.build([hy_row(**{'P(MM)': 100, 'C': 70, 'C(MM)': 100})])

        group = report.tests[0]
        self.assertEqual(group.percentage, PERCENTAGE_NA)
        self.assertFalse(group.is_complete)
        self.assertEqual(group.total_max, 200)
        self.assertEqual(group.total_obtained, 70)
        self.assertEqual(group.subjects[0].obtained, NOT_ATTEMPTED)
        self.assertEqual(group.subjects[0].max_marks, 100)

    def test_non_numeric_obtained_is_not_attempted(self):
        report = ReportBuilder.build([hy_row(**{'P': 'AB', 'P(MM)': 100, 'C': 70, 'C(MM)': 100})])

        group = report.tests[0]
        self.assertEqual(group.percentage, PERCENTAGE_NA)
        self.assertEqual(group.subjects[0].obtained, 'AB')

    def test_group_without_max_marks_is_dropped(self):
        report = ReportBuilder.build([
            hy_row(**{'P': 80, 'C': 70}),
            hy_row(**{'Test Type': 'ST/OT', 'Test Name': 'ST-02', 'P': 30, 'P(MM)': 40}),
        ])

        self.assertEqual([g.display_title for g in report.tests], ['ST-02'])

    def test_zero_max_marks_contribute_nothing(self):
        report = ReportBuilder.build([hy_row(**{'P': 0, 'P(MM)': 0, 'C': 30, 'C(MM)': 50})])

        group = report.tests[0]
        self.assertEqual(group.total_max, 50)
        self.assertEqual(group.total_obtained, 30)
        self.assertEqual(group.percentage, 60.0)
        # The subject still shows on the card
        self.assertEqual(len(group.subjects), 2)

    def test_obtained_without_max_is_dropped(self):
        report = ReportBuilder.build([hy_row(**{'P': 40})])
        self.assertEqual(report.tests, [])

    def test_same_type_rows_merge(self):
        report = ReportBuilder.build([
            hy_row(**{'P': 80, 'P(MM)': 100, 'Test Date': 45600}),
            hy_row(**{'C': 60, 'C(MM)': 100, 'Test Name': 'HY Chemistry', 'Test Date': 45610}),
        ])

        self.assertEqual(len(report.tests), 1)
        group = report.tests[0]
        self.assertEqual(group.total_obtained, 140)
        self.assertEqual(group.total_max, 200)
        self.assertEqual(group.percentage, 70.0)
        self.assertEqual([s.test_name for s in group.subjects], ['HY Exam', 'HY Chemistry'])

    def test_individual_tests_never_merge(self):
        rows = [
            hy_row(**{'Test Type': 'ST/OT', 'Test Name': 'ST-01', 'Test Date': 45500, 'P': 30, 'P(MM)': 40}),
            hy_row(**{'Test Type': 'ST/OT', 'Test Name': 'ST-01', 'Test Date': 45510, 'P': 35, 'P(MM)': 40}),
            hy_row(**{'Test Type': 'ST/OT', 'Test Name': 'ST-01', 'Test Date': 45510, 'P': 20, 'P(MM)': 40}),
        ]
        report = ReportBuilder.build(rows)

        self.assertEqual(len(report.tests), 3)
        self.assertEqual(len({g.id for g in report.tests}), 3)
        self.assertEqual([g.percentage for g in report.tests], [75.0, 87.5, 50.0])
        for group in report.tests:
            self.assertFalse(group.is_consolidated)
            self.assertEqual(group.display_title, 'ST-01')
        self.assertEqual(report.tests[0].date, '27 Jul 2024')

    def test_percentage_rounds_to_two_places(self):
        report = ReportBuilder.build([hy_row(**{'P': 2, 'P(MM)': 3})])
        self.assertEqual(report.tests[0].percentage, 66.67)

    def test_total_max_sums_positive_subject_maximums(self):
        index = RecordIndex(SAMPLE_ROWS)
        for roll in index.roll_numbers():
            report = ReportBuilder.build(index.rows_for(roll))
            for group in report.tests:
                expected = sum(s.max_marks for s in group.subjects
                               if isinstance(s.max_marks, (int, float)) and s.max_marks > 0)
                self.assertEqual(group.total_max, expected)
                self.assertGreater(group.total_max, 0)


class TestSampleReport(unittest.TestCase):
    """End-to-end checks on the bundled sample student"""

    def setUp(self):
        self.rows = RecordIndex(SAMPLE_ROWS).rows_for('242009695')
        self.report = ReportBuilder.build(self.rows)

    def test_profile_from_first_row(self):
        profile = self.report.profile
        self.assertEqual(profile.name, 'Aarav Sharma')
        self.assertEqual(profile.roll_no, 242009695)
        self.assertEqual(profile.batch, 'Foundation X')
        self.assertEqual(profile.class_name, '10')

    def test_groups(self):
        titles = [g.display_title for g in self.report.tests]
        self.assertEqual(titles, [
            'Half Yearly Examination',
            'Re-Half Yearly Examination',
            'ST-01',
            'ST-01',
            'Part Test 1',
            'Pre Board 2 Examination',
        ])

        half_yearly, re_half_yearly, st_1, st_2, part_test, pre_board = self.report.tests
        self.assertEqual((half_yearly.total_obtained, half_yearly.total_max, half_yearly.percentage), (195, 250, 78.0))
        self.assertEqual((re_half_yearly.total_obtained, re_half_yearly.total_max), (60, 200))
        self.assertEqual(re_half_yearly.percentage, PERCENTAGE_NA)
        self.assertEqual(st_1.percentage, 62.5)
        self.assertEqual(st_2.percentage, 87.5)
        self.assertEqual(part_test.percentage, 50.0)
        self.assertEqual(part_test.type_tag, 'Part Test')
        self.assertEqual(pre_board.percentage, 56.25)
        self.assertEqual(pre_board.type_tag, 'Pre Board 2')

    def test_history_sorted_and_filtered(self):
        history = self.report.history
        self.assertEqual([p.raw_date for p in history], [45500, 45510, 45550, 45600, 45601, 45700, 45800])
        self.assertEqual([p.percentage for p in history], [62.5, 87.5, 50.0, 75.0, 90.0, 60.0, 56.25])
        self.assertEqual(history[0].date, '27 Jul 2024')
        # Only the Half-Yearly rename is applied to history types
        self.assertEqual(history[-1].type_tag, 'Pre Board')
        self.assertEqual(history[5].type_tag, 'Re-Half Yearly')

    def test_st_ot_graph(self):
        self.assertEqual([p.test_name for p in self.report.st_ot], ['ST-01', 'ST-01', 'Part Test 1'])

    def test_major_exams(self):
        major = self.report.major
        self.assertEqual([m.type_tag for m in major], ['Half Yearly', 'Re-Half Yearly', 'Pre Board 2'])
        self.assertEqual([m.percentage for m in major], [78.0, 30.0, 56.25])
        self.assertEqual(major[0].raw_date, 45600)
        self.assertEqual(major[0].test_name, 'Half Yearly')

    def test_subject_performance(self):
        performance = self.report.subject_performance
        self.assertEqual(list(performance.keys()), ['ST/OT', 'Part Test', 'Major Exams'])
        self.assertEqual(performance['ST/OT'], [
            {'subject': 'Physics', 'percentage': 81.3},
            {'subject': 'Chemistry', 'percentage': 50.0},
        ])
        self.assertEqual(performance['Part Test'], [
            {'subject': 'Mathematics', 'percentage': 60.0},
            {'subject': 'Biology', 'percentage': 40.0},
        ])
        self.assertEqual(performance['Major Exams'], [
            {'subject': 'Physics', 'percentage': 72.2},
            {'subject': 'Chemistry', 'percentage': 60.7},
            {'subject': 'Mathematics', 'percentage': 90.0},
        ])


class TestHistory(unittest.TestCase):

    def test_zero_max_rows_never_appear(self):
        rows = [
            hy_row(**{'P(MM)': 100}),
            hy_row(**{'P': 'AB', 'P(MM)': 100}),
            hy_row(**{'P': 40}),
        ]
        self.assertEqual(ReportBuilder.build_history(rows), [])

    def test_max_counted_only_for_attempted_subjects(self):
        rows = [hy_row(**{'P': 40, 'P(MM)': 50, 'C(MM)': 50})]
        history = ReportBuilder.build_history(rows)
        self.assertEqual(history[0].percentage, 80.0)

    def test_unparseable_dates_dropped(self):
        rows = [
            hy_row(**{'P': 40, 'P(MM)': 50, 'Test Date': 'not a date'}),
            hy_row(**{'P': 40, 'P(MM)': 50, 'Test Date': None}),
            hy_row(**{'P': 30, 'P(MM)': 50, 'Test Date': 45292}),
        ]
        history = ReportBuilder.build_history(rows)
        self.assertEqual(len(history), 1)
        self.assertEqual(history[0].date, '1 Jan 2024')

    def test_st_ot_uses_history_type(self):
        """The trend filter reads the row type, not the pre-board corrected type"""
        rows = [hy_row(**{'Test Type': 'ST/OT', 'Test Name': 'Pre Board 1', 'P': 10, 'P(MM)': 20})]
        report = ReportBuilder.build(rows)
        self.assertEqual(report.tests[0].type_tag, 'Pre Board 1')
        self.assertTrue(report.tests[0].is_consolidated)
        self.assertEqual(len(report.st_ot), 1)


class TestMajorExams(unittest.TestCase):

    def test_sums_across_rows(self):
        rows = [
            hy_row(**{'Test Type': 'Annual Exam', 'Test Name': 'Annual P', 'Test Date': 45900, 'P': 50, 'P(MM)': 100}),
            hy_row(**{'Test Type': 'Annual Exam', 'Test Name': 'Annual C', 'Test Date': 45800,
                      'C(MM)': 100}),
        ]
        major = ReportBuilder.build_major_exams(rows)
        self.assertEqual(len(major), 1)
        self.assertEqual(major[0].type_tag, 'Annual Exam')
        self.assertEqual(major[0].percentage, 25.0)
        # First seen date is kept
        self.assertEqual(major[0].raw_date, 45900)

    def test_types_without_max_marks_are_left_out(self):
        rows = [hy_row(**{'Test Type': 'Annual Exam', 'P': 50})]
        self.assertEqual(ReportBuilder.build_major_exams(rows), [])


class TestSubjectPerformance(unittest.TestCase):

    def test_rows_outside_categories_excluded(self):
        rows = [hy_row(**{'Test Type': 'Other', 'Test Name': 'Quiz', 'P': 10, 'P(MM)': 10})]
        self.assertEqual(ReportBuilder.build_subject_performance(rows), {})

    def test_requires_numeric_obtained_and_positive_max(self):
        rows = [hy_row(**{'P': 'AB', 'P(MM)': 100, 'C': 10, 'C(MM)': 0, 'B': 9, 'B(MM)': 10})]
        self.assertEqual(ReportBuilder.build_subject_performance(rows),
                         {'Major Exams': [{'subject': 'Biology', 'percentage': 90.0}]})


if __name__ == '__main__':
    unittest.main()
