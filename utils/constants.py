"""
Column names and lookup tables for the results workbook
"""

# Profile columns
COL_LEARNER_NAME = 'Learner Name'
COL_ROLL_NO = 'Roll No.'
COL_BATCH_NAME = 'Batch Name'
COL_CLASS = 'Class'

# Test columns
COL_TEST_TYPE = 'Test Type'
COL_TEST_NAME = 'Test Name'
COL_TEST_DATE = 'Test Date'
COL_PERCENTAGE = '%'

# Subject code -> display name, in report order
SUBJECT_MAP = {
    'P': 'Physics',
    'C': 'Chemistry',
    'Math': 'Mathematics',
    'B': 'Biology',
    'MAT': 'Mental Ability',
    'E': 'English',
    'SST': 'Social Studies',
    'H': 'Hindi',
}

MAJOR_EXAM_TYPES = ('Half Yearly', 'Re-Half Yearly', 'Annual Exam', 'Pre Board')

CATEGORY_ST_OT = 'ST/OT'
CATEGORY_PART_TEST = 'Part Test'
CATEGORY_MAJOR = 'Major Exams'
PERFORMANCE_CATEGORIES = (CATEGORY_ST_OT, CATEGORY_PART_TEST, CATEGORY_MAJOR)

NOT_ATTEMPTED = '-'
PERCENTAGE_NA = 'NA'


def max_marks_column(code):
    """'P' -> 'P(MM)'"""
    return f'{code}(MM)'
