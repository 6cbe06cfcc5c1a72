#!/usr/bin/env python3
"""
Sample data generator for the PTM Report Card Portal
Writes a small results workbook for testing and demonstration
"""

import os

import openpyxl

from config import Config
from utils.constants import (
    COL_LEARNER_NAME, COL_ROLL_NO, COL_BATCH_NAME, COL_CLASS,
    COL_TEST_TYPE, COL_TEST_NAME, COL_TEST_DATE, SUBJECT_MAP, max_marks_column
)


def _row(name, roll, test_type, test_name, test_date, batch='Foundation X', class_name='10', **marks):
    row = {
        COL_LEARNER_NAME: name,
        COL_ROLL_NO: roll,
        COL_BATCH_NAME: batch,
        COL_CLASS: class_name,
        COL_TEST_TYPE: test_type,
        COL_TEST_NAME: test_name,
        COL_TEST_DATE: test_date,
    }
    # P=80, P_MM=100 -> 'P': 80, 'P(MM)': 100
    for key, value in marks.items():
        column = max_marks_column(key[:-3]) if key.endswith('_MM') else key
        row[column] = value
    return row


SAMPLE_ROWS = [
    _row('Aarav Sharma', 242009695, 'half yearly ', 'HY Exam', 45600, P=80, P_MM=100, C=70, C_MM=100),
    _row('Aarav Sharma', 242009695, 'Half Yearly', 'HY Exam Part 2', 45601, Math=45, Math_MM=50),
    _row('Aarav Sharma', 242009695, 'Half Yearly', 'Re Half Yearly Exam', 45700, P_MM=100, C=60, C_MM=100),
    _row('Aarav Sharma', 242009695, 'ST/OT', 'ST-01', 45500, P=30, P_MM=40, C=20, C_MM=40),
    _row('Aarav Sharma', 242009695, 'ST/OT', 'ST-01', 45510, P=35, P_MM=40),
    _row('Aarav Sharma', 242009695, 'Part Test', 'Part Test 1', 45550, Math=60, Math_MM=100, B=40, B_MM=100),
    _row('Aarav Sharma', 242009695, 'Pre Board', 'Pre-Board-2', 45800, P=50, P_MM=80, C=40, C_MM=80),
    _row('Aarav Sharma', 242009695, 'Annual Exam', 'Annual', 45900, P='AB'),
    _row('Diya Verma', '242009700', 'Half Yearly', 'HY Exam', 45600, batch='Foundation Y', class_name='9',
         E=40, E_MM=50, H='AB', H_MM=50),
]

SAMPLE_HEADERS = [
    COL_LEARNER_NAME, COL_ROLL_NO, COL_BATCH_NAME, COL_CLASS, COL_TEST_TYPE, COL_TEST_NAME, COL_TEST_DATE,
] + [column for code in SUBJECT_MAP for column in (code, max_marks_column(code))]


def create_sample_workbook(rows=None):
    """Workbook with one header row and one row per record"""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = 'Results'
    ws.append(SAMPLE_HEADERS)
    for row in rows if rows is not None else SAMPLE_ROWS:
        ws.append([row.get(header) for header in SAMPLE_HEADERS])
    return wb


def main():
    path = Config.RESULTS_WORKBOOK
    os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
    create_sample_workbook().save(path)
    print(f"✓ Wrote {len(SAMPLE_ROWS)} sample rows to {path}")


if __name__ == '__main__':
    main()
