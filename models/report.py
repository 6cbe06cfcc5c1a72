"""
Report models for the PTM Report Card Portal
TestGroup, history points and the Report returned by the report builder
"""

from utils.constants import PERCENTAGE_NA, PERFORMANCE_CATEGORIES
from utils.numbers import is_number


class SubjectScore:
    """One subject's marks inside a test group"""

    def __init__(self, name, obtained, max_marks, test_name=None):
        self.name = name
        self.obtained = obtained
        self.max_marks = max_marks
        self.test_name = test_name

    @property
    def is_below_pass(self):
        """True when a numeric score is under 40% of the maximum"""
        if not is_number(self.obtained) or not is_number(self.max_marks):
            return False
        return self.obtained < self.max_marks * 0.4

    def to_dict(self):
        return {
            'name': self.name,
            'test_name': self.test_name,
            'obtained': self.obtained,
            'max': self.max_marks,
        }

    def __repr__(self):
        return f'<SubjectScore {self.name} {self.obtained}/{self.max_marks}>'


class TestGroup:
    """One test occurrence, or one consolidated exam category"""

    __test__ = False

    def __init__(self, group_id, type_tag, display_title, is_consolidated=True, date=None,
                 subjects=None, total_obtained=0, total_max=0, percentage=PERCENTAGE_NA):
        self.id = group_id
        self.type_tag = type_tag
        self.display_title = display_title
        self.is_consolidated = is_consolidated
        self.date = date
        self.subjects = list(subjects or [])
        self.total_obtained = total_obtained
        self.total_max = total_max
        self.percentage = percentage

    @property
    def is_complete(self):
        """False when some subject with maximum marks was not attempted"""
        return self.percentage != PERCENTAGE_NA

    @property
    def performance_band(self):
        """Colour band used by the report card: excellent, good, average or poor"""
        if not self.is_complete:
            return 'partial'
        if self.percentage >= 90:
            return 'excellent'
        elif self.percentage >= 75:
            return 'good'
        elif self.percentage >= 50:
            return 'average'
        return 'poor'

    def to_dict(self):
        return {
            'id': self.id,
            'display_title': self.display_title,
            'is_consolidated': self.is_consolidated,
            'type_tag': self.type_tag,
            'date': self.date,
            'total_obtained': self.total_obtained,
            'total_max': self.total_max,
            'percentage': self.percentage,
            'subjects': [s.to_dict() for s in self.subjects],
        }

    def __repr__(self):
        return f'<TestGroup {self.display_title} {self.percentage}>'


class HistoryPoint:
    """A single row flattened to one percentage for trend charts"""

    def __init__(self, date, raw_date, type_tag, test_name, percentage):
        self.date = date
        self.raw_date = raw_date
        self.type_tag = type_tag
        self.test_name = test_name
        self.percentage = percentage

    @property
    def label(self):
        return self.test_name or self.type_tag

    def to_dict(self):
        return {
            'date': self.date,
            'raw_date': self.raw_date,
            'type': self.type_tag,
            'test_name': self.test_name,
            'percentage': self.percentage,
        }

    def __repr__(self):
        return f'<HistoryPoint {self.date} {self.test_name} {self.percentage}%>'


class MajorExamPoint(HistoryPoint):
    """Aggregate of every row of one major exam category"""

    def __init__(self, type_tag, date, raw_date, percentage):
        super(MajorExamPoint, self).__init__(date, raw_date, type_tag, type_tag, percentage)

    def __repr__(self):
        return f'<MajorExamPoint {self.type_tag} {self.percentage}%>'


class Report:
    """Everything a report card renders for one student"""

    def __init__(self, profile, tests=None, history=None, st_ot=None, major=None,
                 subject_performance=None):
        self.profile = profile
        self.tests = list(tests or [])
        self.history = list(history or [])
        self.graphs = {
            'st_ot': list(st_ot or []),
            'major': list(major or []),
        }
        self.subject_performance = dict(subject_performance or {})

    @property
    def st_ot(self):
        return self.graphs['st_ot']

    @property
    def major(self):
        return self.graphs['major']

    def ordered_subject_performance(self):
        """(category, subjects) pairs in the fixed category order"""
        return [(category, self.subject_performance[category])
                for category in PERFORMANCE_CATEGORIES
                if category in self.subject_performance]

    def to_dict(self):
        """Convert report to a JSON friendly dictionary"""
        return {
            'profile': self.profile.to_dict(),
            'tests': [t.to_dict() for t in self.tests],
            'history': [h.to_dict() for h in self.history],
            'graphs': {
                'st_ot': [h.to_dict() for h in self.st_ot],
                'major': [m.to_dict() for m in self.major],
            },
            'subject_performance': {
                category: [dict(entry) for entry in subjects]
                for category, subjects in self.ordered_subject_performance()
            },
        }

    def __repr__(self):
        return f'<Report {self.profile.roll_no} tests={len(self.tests)}>'
