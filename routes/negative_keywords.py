"""
Negative keyword API routes.

Flow: download template -> upload filled workbook (parse + normalize) ->
review the grouped payload -> submit. Each submit returns a fresh report.
"""

from io import BytesIO

from fastapi import APIRouter, UploadFile, File
from fastapi.responses import JSONResponse, StreamingResponse
import structlog

from exceptions import AppError, ValidationError
from models.negative_keyword import (
    NormalizeRequest,
    NormalizeResponse,
    RequestGroup,
    SubmissionReport,
    SubmitRequest,
)
from parsers.keyword_sheet_parser import parse_keyword_sheet
from services.normalizer_service import count_keywords, normalize_records, render_groups
from services.submission_service import get_submission_service
from services.template_service import TEMPLATE_FILENAME, get_template_service

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/negative-keywords", tags=["Negative Keywords"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


def _build_normalize_response(groups: list[RequestGroup]) -> NormalizeResponse:
    return NormalizeResponse(
        groups=groups,
        group_count=len(groups),
        keyword_count=count_keywords(groups),
        preview=render_groups(groups),
    )


# ===================
# ROUTES
# ===================

@router.get("/template")
async def download_template():
    """
    Download the upload template.

    Four required columns plus example rows.
    """
    try:
        output = get_template_service().generate_template()

        return StreamingResponse(
            output,
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{TEMPLATE_FILENAME}"'},
        )

    except Exception as e:
        return handle_error(e)


@router.post("/upload", response_model=NormalizeResponse)
async def upload_keywords(file: UploadFile = File(...)):
    """
    Upload a filled template and get the grouped payload back.

    Incomplete rows are skipped silently. The whole upload fails only when
    the file cannot be read or a required column is missing.

    Raises:
        422: File is not a readable workbook, or columns are missing
    """
    logger.info(
        "keyword_upload_started",
        filename=file.filename,
        content_type=file.content_type
    )

    try:
        content = await file.read()
        records = parse_keyword_sheet(BytesIO(content))
        groups = normalize_records(records)

        logger.info(
            "keyword_upload_completed",
            filename=file.filename,
            groups=len(groups)
        )

        return _build_normalize_response(groups)

    except Exception as e:
        return handle_error(e)


@router.post("/normalize", response_model=NormalizeResponse)
async def normalize_keywords(request: NormalizeRequest):
    """
    Group and deduplicate rows a client has already parsed.

    Rows use the canonical keys advertiser_id, unit_id, keyword, match_type.
    """
    try:
        groups = normalize_records(request.records)
        return _build_normalize_response(groups)

    except Exception as e:
        return handle_error(e)


@router.post("/submit", response_model=SubmissionReport)
async def submit_keywords(request: SubmitRequest):
    """
    Submit every group to the advertising API.

    Waits for all requests to settle. Per-group failures are listed in the
    report and never fail the request as a whole.

    Raises:
        422: No groups to submit
    """
    try:
        if not request.groups:
            raise ValidationError(
                message="Nothing to submit, please upload and process a file first",
                code="NO_GROUPS_TO_SUBMIT"
            )

        service = get_submission_service()
        report = await service.submit_and_report(request.groups)

        if not report.all_succeeded:
            logger.warning(
                "keyword_submission_partial_failure",
                failed=report.failed,
                total=report.total
            )

        return report

    except Exception as e:
        return handle_error(e)
