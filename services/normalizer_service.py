"""
Normalizer: turn loosely-typed spreadsheet rows into request groups.

Rows are grouped by (advertiser_id, unit_id) and keywords are deduplicated
by text inside each group. Input order decides both group order and keyword
order; the first occurrence of a keyword wins, match type included.

Rows missing any required field are skipped and logged, never raised.
"""

import json
import math
import numbers
from typing import Any, Iterable, Mapping, Optional

import structlog

from models.negative_keyword import (
    ADVERTISER_ID,
    KEYWORD,
    MATCH_TYPE,
    REQUIRED_FIELDS,
    UNIT_ID,
    NegativeKeyword,
    Number,
    RequestGroup,
    group_key,
)

logger = structlog.get_logger(__name__)


def normalize_records(records: Iterable[Mapping[str, Any]]) -> list[RequestGroup]:
    """
    Group and deduplicate raw rows.

    Args:
        records: Rows keyed by the canonical field names. Values may be
                 strings, numbers, None or NaN (empty spreadsheet cells).

    Returns:
        One RequestGroup per distinct advertiser/unit pair, in first-seen order

    Example:
        [(1, 10, "free", 1), (1, 10, "tutorial", 0), (1, 10, "free", 0)]
        -> [{advertiser_id: 1, unit_id: 10,
             keywords: [{"free", 1}, {"tutorial", 0}]}]
    """
    # key -> (advertiser_id, unit_id, {keyword text -> NegativeKeyword})
    groups: dict[str, tuple[Number, Number, dict[str, NegativeKeyword]]] = {}
    row_count = 0
    skipped = 0

    for index, record in enumerate(records):
        row_count += 1

        missing = [f for f in REQUIRED_FIELDS if _is_missing(record.get(f))]
        if missing:
            skipped += 1
            logger.warning(
                "row_skipped_missing_fields",
                row=index,
                missing=missing,
            )
            continue

        advertiser_id = _coerce_number(record[ADVERTISER_ID])
        unit_id = _coerce_number(record[UNIT_ID])
        match_type = _coerce_number(record[MATCH_TYPE])
        keyword_text = _coerce_text(record[KEYWORD])

        # Non-numeric values are treated the same as empty cells
        invalid = [
            name for name, value in (
                (ADVERTISER_ID, advertiser_id),
                (UNIT_ID, unit_id),
                (MATCH_TYPE, match_type),
            )
            if value is None
        ]
        if invalid:
            skipped += 1
            logger.warning(
                "row_skipped_invalid_number",
                row=index,
                fields=invalid,
            )
            continue

        key = group_key(advertiser_id, unit_id)
        if key not in groups:
            groups[key] = (advertiser_id, unit_id, {})

        keywords = groups[key][2]
        if keyword_text not in keywords:
            keywords[keyword_text] = NegativeKeyword(
                keyword=keyword_text,
                phrase_match_type=match_type,
            )

    result = [
        RequestGroup(
            advertiser_id=advertiser_id,
            unit_id=unit_id,
            keywords=list(keywords.values()),
        )
        for advertiser_id, unit_id, keywords in groups.values()
    ]

    logger.info(
        "records_normalized",
        rows=row_count,
        skipped=skipped,
        groups=len(result),
        keywords=count_keywords(result),
    )

    return result


def render_groups(groups: list[RequestGroup]) -> str:
    """Pretty-print groups as the JSON payload the user reviews and copies."""
    return json.dumps(
        [group.model_dump() for group in groups],
        indent=2,
        ensure_ascii=False,
    )


def count_keywords(groups: list[RequestGroup]) -> int:
    """Total keywords across all groups."""
    return sum(len(group.keywords) for group in groups)


# ===================
# HELPER FUNCTIONS
# ===================

def _is_missing(value: Any) -> bool:
    """None or NaN (how pandas reports an empty cell)."""
    if value is None:
        return True
    if isinstance(value, numbers.Real) and not isinstance(value, numbers.Integral):
        return math.isnan(value)
    return False


def _coerce_number(value: Any) -> Optional[Number]:
    """
    Coerce a cell to int (when integral) or float.

    "123" -> 123, 123.0 -> 123, " 1.5 " -> 1.5, "abc" -> None, "" -> None
    """
    if isinstance(value, bool):
        return int(value)

    # Large ids would lose precision through float
    if isinstance(value, numbers.Integral):
        return int(value)

    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    if number.is_integer():
        return int(number)
    return number


def _coerce_text(value: Any) -> str:
    """Coerce a cell to keyword text; 123.0 -> "123"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
