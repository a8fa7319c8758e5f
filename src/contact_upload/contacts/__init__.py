"""
Contact CSV parsing and row validation.
"""

from contact_upload.contacts.csv_parser import (
    CSVFormatError,
    CSVParser,
    ContactRecord,
    has_required_fields,
    normalize_phone,
    validate_phone,
)

__all__ = [
    "CSVFormatError",
    "CSVParser",
    "ContactRecord",
    "has_required_fields",
    "normalize_phone",
    "validate_phone",
]
