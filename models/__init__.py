"""
Report models package for the PTM Report Card Portal
"""

from .student import Profile
from .report import SubjectScore, TestGroup, HistoryPoint, MajorExamPoint, Report

__all__ = [
    'Profile', 'SubjectScore', 'TestGroup', 'HistoryPoint',
    'MajorExamPoint', 'Report'
]
