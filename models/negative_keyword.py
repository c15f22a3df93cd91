"""
Negative keyword models.

Covers the grouped request payload sent to the advertising API and the
per-group outcomes of a batch submission.
"""

from enum import IntEnum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from models.base import BaseSchema


# Ids and match types are coerced numbers, not validated ranges
Number = Union[int, float]

# Canonical raw record fields
ADVERTISER_ID = "advertiser_id"
UNIT_ID = "unit_id"
KEYWORD = "keyword"
MATCH_TYPE = "match_type"

REQUIRED_FIELDS = (ADVERTISER_ID, UNIT_ID, KEYWORD, MATCH_TYPE)

# Spreadsheet headers, as written by the upload template
TEMPLATE_HEADERS = {
    ADVERTISER_ID: "广告主id（短id）",
    UNIT_ID: "单元id",
    KEYWORD: "否定词（1个词1行）",
    MATCH_TYPE: "匹配方式（0-精准匹配，1-短语匹配）",
}


class MatchType(IntEnum):
    """Match type values accepted by the advertising API."""
    EXACT = 0
    PHRASE = 1


# ===================
# REQUEST PAYLOAD
# ===================

class NegativeKeyword(BaseModel):
    """One negative keyword inside a request group."""

    keyword: str = Field(description="Keyword text, deduplicated as typed")
    phrase_match_type: Number = Field(
        description="0 = exact match, 1 = phrase match (not range-checked)"
    )


class RequestGroup(BaseModel):
    """
    All negative keywords for one (advertiser, unit) pair.

    Serializes to the exact request body of one API call:
    {"advertiser_id", "unit_id", "keywords": [{"keyword", "phrase_match_type"}]}
    """

    advertiser_id: Number
    unit_id: Number
    keywords: list[NegativeKeyword] = Field(default_factory=list)

    @property
    def key(self) -> str:
        """Grouping key, e.g. "123-456"."""
        return group_key(self.advertiser_id, self.unit_id)


def group_key(advertiser_id: Number, unit_id: Number) -> str:
    """
    Build the grouping key for an advertiser/unit pair.

    The "-" separator keeps (1, 23) and (12, 3) apart.
    """
    return f"{advertiser_id}-{unit_id}"


# ===================
# SUBMISSION OUTCOMES
# ===================

class SubmissionSuccess(BaseModel):
    """A group accepted by the API."""

    status: Literal["success"] = "success"
    advertiser_id: Number
    unit_id: Number

    @property
    def succeeded(self) -> bool:
        return True


class SubmissionFailure(BaseModel):
    """A group rejected by the API or lost in transport."""

    status: Literal["failed"] = "failed"
    advertiser_id: Number
    unit_id: Number
    message: str

    @property
    def succeeded(self) -> bool:
        return False


SubmissionOutcome = Annotated[
    Union[SubmissionSuccess, SubmissionFailure],
    Field(discriminator="status"),
]


class SubmissionReport(BaseModel):
    """
    Aggregated result of one submit call.

    Built fresh from that call's outcomes; reports never accumulate.
    """

    total: int = Field(ge=0)
    succeeded: int = Field(ge=0)
    failed: int = Field(ge=0)
    failures: list[SubmissionFailure] = Field(default_factory=list)
    message: str

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0

    @classmethod
    def from_outcomes(cls, outcomes: list) -> "SubmissionReport":
        """Aggregate per-group outcomes into a report."""
        failures = [o for o in outcomes if not o.succeeded]
        total = len(outcomes)

        if failures:
            message = (
                f"{len(failures)} of {total} requests failed, "
                "see the failure list for details."
            )
        else:
            message = "All data submitted successfully."

        return cls(
            total=total,
            succeeded=total - len(failures),
            failed=len(failures),
            failures=failures,
            message=message,
        )


# ===================
# API WRAPPERS
# ===================

class NormalizeRequest(BaseSchema):
    """Already-parsed rows to normalize (canonical field names)."""

    records: list[dict[str, Any]] = Field(default_factory=list)


class NormalizeResponse(BaseSchema):
    """Grouped payload ready for review and submission."""

    groups: list[RequestGroup]
    group_count: int
    keyword_count: int
    preview: str = Field(description="Pretty-printed JSON of the groups")


class SubmitRequest(BaseSchema):
    """Groups to submit, usually the `groups` of a NormalizeResponse."""

    groups: list[RequestGroup] = Field(default_factory=list)
