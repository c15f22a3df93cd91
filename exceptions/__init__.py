"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    ValidationError,

    # Spreadsheet parser
    SpreadsheetParseError,
    SpreadsheetMissingColumnsError,
)

__all__ = [
    # Base
    "AppError",
    "ValidationError",

    # Spreadsheet parser
    "SpreadsheetParseError",
    "SpreadsheetMissingColumnsError",
]
