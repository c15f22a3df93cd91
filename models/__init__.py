"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema
from models.negative_keyword import (
    ADVERTISER_ID,
    UNIT_ID,
    KEYWORD,
    MATCH_TYPE,
    REQUIRED_FIELDS,
    TEMPLATE_HEADERS,
    MatchType,
    NegativeKeyword,
    RequestGroup,
    group_key,
    SubmissionSuccess,
    SubmissionFailure,
    SubmissionOutcome,
    SubmissionReport,
    NormalizeRequest,
    NormalizeResponse,
    SubmitRequest,
)

__all__ = [
    # Base
    "BaseSchema",

    # Record fields
    "ADVERTISER_ID",
    "UNIT_ID",
    "KEYWORD",
    "MATCH_TYPE",
    "REQUIRED_FIELDS",
    "TEMPLATE_HEADERS",

    # Negative keywords
    "MatchType",
    "NegativeKeyword",
    "RequestGroup",
    "group_key",
    "SubmissionSuccess",
    "SubmissionFailure",
    "SubmissionOutcome",
    "SubmissionReport",
    "NormalizeRequest",
    "NormalizeResponse",
    "SubmitRequest",
]
