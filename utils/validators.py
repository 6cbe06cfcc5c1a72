"""
Validation utilities for the PTM Report Card Portal
"""

import re


def normalize_roll_number(roll_number):
    """Return the lookup key for a roll number.

    Numeric and string forms of the same roll number share a key:
    242009695, 242009695.0 and ' 242009695 ' all become '242009695'.
    """
    if roll_number is None or isinstance(roll_number, bool):
        return None
    if isinstance(roll_number, float):
        if roll_number != roll_number:
            return None
        if roll_number.is_integer():
            return str(int(roll_number))
        return str(roll_number)
    if isinstance(roll_number, int):
        return str(roll_number)

    text = str(roll_number).strip()
    if not text:
        return None
    # '242009695.0' typed or exported as text
    if re.match(r'^\d+\.0+$', text):
        return text.split('.')[0]
    return text


def validate_roll_number(roll_number):
    """Validate a roll number entered in the search form"""
    if roll_number is None or len(str(roll_number).strip()) == 0:
        return False, "Roll number is required"

    roll_number = str(roll_number).strip()
    if len(roll_number) > 20:
        return False, "Roll number must be 20 characters or less"

    # Allow alphanumeric and some special characters
    if not re.match(r'^[A-Za-z0-9_.-]+$', roll_number):
        return False, "Roll number can only contain letters, numbers, periods, hyphens, and underscores"

    return True, "Valid roll number"


def allowed_file(filename, allowed_extensions):
    """Check an uploaded file name against the allowed extensions"""
    if not filename or '.' not in filename:
        return False
    return filename.rsplit('.', 1)[1].lower() in allowed_extensions


def validate_results_upload(file_storage, allowed_extensions):
    """Validate an uploaded results workbook"""
    if file_storage is None or not file_storage.filename:
        return False, "No file selected"

    if not allowed_file(file_storage.filename, allowed_extensions):
        return False, f"File must be one of: {', '.join(sorted(allowed_extensions))}"

    return True, "Valid workbook"
