"""
Spreadsheet parsers module.
"""

from parsers.keyword_sheet_parser import parse_keyword_sheet

__all__ = [
    "parse_keyword_sheet",
]
