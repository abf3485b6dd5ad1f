"""
Complaints Package - Taxonomy resolution, intake validation and storage
"""
from .errors import (
    ComplaintError, ValidationFailure, MissingField, InvalidSubcategory,
    FileTooLarge, FieldTooLarge, UnsupportedFileType, InvalidStatus, NotFound, StoreUnavailable
)

__all__ = [
    "ComplaintError", "ValidationFailure", "MissingField", "InvalidSubcategory",
    "FileTooLarge", "FieldTooLarge", "UnsupportedFileType", "InvalidStatus", "NotFound", "StoreUnavailable",
]
