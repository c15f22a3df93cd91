"""
Business logic services.

Each service handles one step of the upload flow.
"""

from services.normalizer_service import normalize_records, render_groups, count_keywords
from services.submission_service import KeywordSubmissionService, get_submission_service
from services.template_service import TemplateService, get_template_service

__all__ = [
    "normalize_records",
    "render_groups",
    "count_keywords",
    "KeywordSubmissionService",
    "get_submission_service",
    "TemplateService",
    "get_template_service",
]
