"""
Custom exception classes for the application.

Only whole-request failures are exceptions. Skipped rows and per-group
submission failures are reported as data, not raised.
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "SPREADSHEET_PARSE_ERROR")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


# ===================
# SPREADSHEET PARSER
# ===================

class SpreadsheetParseError(ValidationError):
    """Uploaded file could not be read as a keyword spreadsheet."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None,
        code: str = "SPREADSHEET_PARSE_ERROR"
    ):
        super().__init__(
            code=code,
            message=message,
            details=details
        )


class SpreadsheetMissingColumnsError(SpreadsheetParseError):
    """Required columns are absent from the header row."""

    def __init__(self, missing_columns: list[str], found_columns: list[str]):
        super().__init__(
            code="SPREADSHEET_MISSING_COLUMNS",
            message=f"Missing required columns: {', '.join(missing_columns)}",
            details={
                "missing_columns": missing_columns,
                "found_columns": found_columns,
            }
        )
