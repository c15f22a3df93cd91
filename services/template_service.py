"""
Template service. Generates the negative keyword upload template.

The workbook has the four required columns and a few example rows, in the
exact shape parse_keyword_sheet() accepts.
"""

from io import BytesIO
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
import structlog

from models.negative_keyword import (
    ADVERTISER_ID,
    KEYWORD,
    MATCH_TYPE,
    TEMPLATE_HEADERS,
    UNIT_ID,
)

logger = structlog.get_logger(__name__)

TEMPLATE_SHEET_NAME = "批量加否模板"
TEMPLATE_FILENAME = "negative_keyword_template.xlsx"

COLUMN_ORDER = (ADVERTISER_ID, UNIT_ID, KEYWORD, MATCH_TYPE)

EXAMPLE_ROWS = [
    {ADVERTISER_ID: 123456789, UNIT_ID: 987654321, KEYWORD: "免费", MATCH_TYPE: 1},
    {ADVERTISER_ID: 123456789, UNIT_ID: 987654321, KEYWORD: "教程", MATCH_TYPE: 0},
    {ADVERTISER_ID: 111222333, UNIT_ID: 444555666, KEYWORD: "破解", MATCH_TYPE: 1},
]


class TemplateService:
    """Service for generating the upload template."""

    def generate_template(self) -> BytesIO:
        """
        Generate the upload template workbook.

        Returns:
            BytesIO containing the .xlsx file
        """
        wb = Workbook()
        ws = wb.active
        ws.title = TEMPLATE_SHEET_NAME

        header_font = Font(bold=True)
        header_fill = PatternFill(start_color="E0E8FF", end_color="E0E8FF", fill_type="solid")

        for col, field in enumerate(COLUMN_ORDER, start=1):
            cell = ws.cell(row=1, column=col, value=TEMPLATE_HEADERS[field])
            cell.font = header_font
            cell.fill = header_fill

        for row, example in enumerate(EXAMPLE_ROWS, start=2):
            for col, field in enumerate(COLUMN_ORDER, start=1):
                ws.cell(row=row, column=col, value=example[field])

        # Ids are long; keep them readable instead of scientific notation
        ws.column_dimensions["A"].width = 20
        ws.column_dimensions["B"].width = 20
        ws.column_dimensions["C"].width = 24
        ws.column_dimensions["D"].width = 36
        ws.freeze_panes = "A2"

        output = BytesIO()
        wb.save(output)
        output.seek(0)

        logger.info("template_generated", example_rows=len(EXAMPLE_ROWS))

        return output


_template_service: Optional[TemplateService] = None


def get_template_service() -> TemplateService:
    """Get or create TemplateService instance."""
    global _template_service
    if _template_service is None:
        _template_service = TemplateService()
    return _template_service
