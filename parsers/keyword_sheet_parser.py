"""
Spreadsheet parser for negative keyword uploads.

Reads the first sheet of the uploaded workbook and returns one raw record per
row, keyed by canonical field names. Rows are not validated here; incomplete
rows are dropped later by the normalizer.
"""

from io import BytesIO
from pathlib import Path
from typing import Any, Union

import pandas as pd
import structlog

from exceptions import SpreadsheetMissingColumnsError, SpreadsheetParseError
from models.negative_keyword import (
    ADVERTISER_ID,
    KEYWORD,
    MATCH_TYPE,
    TEMPLATE_HEADERS,
    UNIT_ID,
)

logger = structlog.get_logger(__name__)

# Accepted header spellings per canonical field (compared after normalizing)
COLUMN_ALIASES = {
    ADVERTISER_ID: [TEMPLATE_HEADERS[ADVERTISER_ID], "广告主id", "advertiser id", "advertiser_id"],
    UNIT_ID: [TEMPLATE_HEADERS[UNIT_ID], "unit id", "unit_id"],
    KEYWORD: [TEMPLATE_HEADERS[KEYWORD], "否定词", "negative keyword", "keyword"],
    MATCH_TYPE: [TEMPLATE_HEADERS[MATCH_TYPE], "匹配方式", "match type", "match_type"],
}


def parse_keyword_sheet(file: Union[str, Path, BytesIO]) -> list[dict[str, Any]]:
    """
    Parse an uploaded negative keyword workbook.

    Args:
        file: File path (str/Path) or file-like object (BytesIO)

    Returns:
        Raw records with keys advertiser_id, unit_id, keyword, match_type.
        Empty cells are None.

    Raises:
        SpreadsheetParseError: If the file cannot be read as a workbook
        SpreadsheetMissingColumnsError: If a required column is absent
    """
    logger.info("parsing_keyword_sheet", file_type=type(file).__name__)

    try:
        df = pd.read_excel(file, sheet_name=0, dtype=object, engine="openpyxl")
    except Exception as e:
        logger.error("keyword_sheet_read_failed", error=str(e), error_type=type(e).__name__)
        raise SpreadsheetParseError(
            message="Failed to read file, please check that it is a valid .xlsx workbook",
            details={"original_error": str(e)}
        )

    column_map = _match_columns(df.columns)

    missing = [field for field in COLUMN_ALIASES if field not in column_map.values()]
    if missing:
        found = [str(col) for col in df.columns]
        logger.warning("keyword_sheet_missing_columns", missing=missing, found=found)
        raise SpreadsheetMissingColumnsError(
            missing_columns=[TEMPLATE_HEADERS[field] for field in missing],
            found_columns=found,
        )

    df = df[list(column_map)].rename(columns=column_map)
    df = df.astype(object).where(pd.notna(df), None)

    records = df.to_dict(orient="records")

    logger.info("keyword_sheet_parsed", rows=len(records))

    return records


# ===================
# HELPER FUNCTIONS
# ===================

def _normalize_header(col: Any) -> str:
    """
    Normalize a header for alias matching.

    "  Advertiser ID " -> "advertiser id"
    "单元ID" -> "单元id"
    """
    return " ".join(str(col).strip().lower().split())


def _match_columns(columns) -> dict[Any, str]:
    """Map original column labels to canonical field names (first match wins)."""
    lookup = {
        _normalize_header(alias): field
        for field, aliases in COLUMN_ALIASES.items()
        for alias in aliases
    }

    column_map: dict[Any, str] = {}
    for col in columns:
        field = lookup.get(_normalize_header(col))
        if field is not None and field not in column_map.values():
            column_map[col] = field
    return column_map
