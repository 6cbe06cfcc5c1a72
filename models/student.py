"""
Student models for the PTM Report Card Portal
Profile of a learner as read from the results workbook
"""

from utils.constants import COL_LEARNER_NAME, COL_ROLL_NO, COL_BATCH_NAME, COL_CLASS


class Profile:
    """Student identity shown at the top of a report card"""

    def __init__(self, name=None, roll_no=None, batch=None, class_name=None):
        self.name = name
        self.roll_no = roll_no
        self.batch = batch
        self.class_name = class_name

    @classmethod
    def from_row(cls, row):
        """Build a profile from one raw workbook row"""
        return cls(
            name=row.get(COL_LEARNER_NAME),
            roll_no=row.get(COL_ROLL_NO),
            batch=row.get(COL_BATCH_NAME),
            class_name=row.get(COL_CLASS),
        )

    @property
    def display_name(self):
        return self.name or 'Student'

    def to_dict(self):
        """Convert profile to dictionary"""
        return {
            'name': self.name,
            'roll_no': self.roll_no,
            'batch': self.batch,
            'class': self.class_name,
        }

    def __eq__(self, other):
        if not isinstance(other, Profile):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f'<Profile {self.roll_no} - {self.name}>'
