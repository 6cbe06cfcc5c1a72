"""
Configuration settings for the PTM Report Card Portal
"""

import os


class Config:
    """Base configuration class"""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'ptm-report-card-secret-key'

    # File upload settings
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB max file size
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or 'uploads'
    ALLOWED_EXTENSIONS = {'xlsx'}

    # Results workbook loaded at startup (first sheet, header in row 1)
    RESULTS_WORKBOOK = os.environ.get('RESULTS_WORKBOOK') or os.path.join(UPLOAD_FOLDER, 'result.xlsx')

    # Report card settings
    SCHOOL_NAME = os.environ.get('SCHOOL_NAME') or 'Foundation School'
    ACADEMIC_SESSION = os.environ.get('ACADEMIC_SESSION') or '2025-26'
    ARCHIVE_NAME = 'Student_Reports.zip'

    # Security settings
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = None
