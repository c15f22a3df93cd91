"""
Batch submitter: send each request group to the advertising API.

One POST per group, all issued concurrently through a shared async client.
A semaphore caps the number of requests in flight. Every group produces
exactly one outcome, and one group's failure never affects another's.
"""

import asyncio
from typing import Optional

import httpx
import structlog

from config import settings
from models.negative_keyword import (
    RequestGroup,
    SubmissionFailure,
    SubmissionOutcome,
    SubmissionReport,
    SubmissionSuccess,
)

logger = structlog.get_logger(__name__)

# Application status code the API returns for an accepted request
SUCCESS_CODE = 0

UNPARSEABLE_RESPONSE_MESSAGE = "Request failed: unable to parse error message from response"
NETWORK_ERROR_MESSAGE = "Network request failed"


class KeywordSubmissionService:
    """Submits negative keyword groups and reports per-group outcomes."""

    def __init__(
        self,
        endpoint_url: str,
        max_concurrency: int = 10,
        timeout_seconds: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            endpoint_url: API endpoint receiving one POST per group
            max_concurrency: Maximum requests in flight at once
            timeout_seconds: Per-request timeout (no retries on expiry)
            transport: Optional httpx transport, used by tests to fake the API
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.endpoint_url = endpoint_url
        self.max_concurrency = max_concurrency
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def submit(self, groups: list[RequestGroup]) -> list[SubmissionOutcome]:
        """
        Submit every group and wait for all of them to settle.

        Args:
            groups: Request groups, usually from normalize_records()

        Returns:
            One outcome per group, in the same order as `groups`
        """
        if not groups:
            return []

        logger.info(
            "submission_started",
            groups=len(groups),
            max_concurrency=self.max_concurrency,
            endpoint=self.endpoint_url,
        )

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded_submit(client: httpx.AsyncClient, group: RequestGroup):
            async with semaphore:
                return await self._submit_group(client, group)

        async with httpx.AsyncClient(
            timeout=self.timeout_seconds,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            results = await asyncio.gather(
                *(bounded_submit(client, group) for group in groups),
                return_exceptions=True,
            )

        outcomes: list[SubmissionOutcome] = []
        for group, result in zip(groups, results):
            if isinstance(result, BaseException):
                if isinstance(result, (KeyboardInterrupt, SystemExit)):
                    raise result
                logger.error(
                    "group_submission_crashed",
                    advertiser_id=group.advertiser_id,
                    unit_id=group.unit_id,
                    error=str(result),
                    error_type=type(result).__name__,
                )
                result = SubmissionFailure(
                    advertiser_id=group.advertiser_id,
                    unit_id=group.unit_id,
                    message=str(result) or type(result).__name__,
                )
            outcomes.append(result)

        failed = sum(1 for o in outcomes if not o.succeeded)
        logger.info(
            "submission_completed",
            total=len(outcomes),
            succeeded=len(outcomes) - failed,
            failed=failed,
        )

        return outcomes

    async def submit_and_report(self, groups: list[RequestGroup]) -> SubmissionReport:
        """Submit all groups and aggregate the outcomes into a fresh report."""
        outcomes = await self.submit(groups)
        return SubmissionReport.from_outcomes(outcomes)

    async def _submit_group(
        self,
        client: httpx.AsyncClient,
        group: RequestGroup,
    ) -> SubmissionOutcome:
        """POST one group and interpret the response."""
        log = logger.bind(advertiser_id=group.advertiser_id, unit_id=group.unit_id)

        try:
            response = await client.post(self.endpoint_url, json=group.model_dump())
        except httpx.HTTPError as e:
            log.warning(
                "group_submission_transport_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            return SubmissionFailure(
                advertiser_id=group.advertiser_id,
                unit_id=group.unit_id,
                message=str(e) or NETWORK_ERROR_MESSAGE,
            )

        body = _decode_body(response)

        if response.is_success and _is_success_code(body):
            log.debug("group_submitted", keywords=len(group.keywords))
            return SubmissionSuccess(
                advertiser_id=group.advertiser_id,
                unit_id=group.unit_id,
            )

        message = (body or {}).get("message") or UNPARSEABLE_RESPONSE_MESSAGE
        log.warning(
            "group_submission_failed",
            http_status=response.status_code,
            code=(body or {}).get("code"),
            message=message,
        )
        return SubmissionFailure(
            advertiser_id=group.advertiser_id,
            unit_id=group.unit_id,
            message=str(message),
        )


def _decode_body(response: httpx.Response) -> Optional[dict]:
    """Decode a JSON object body, or None if the body is not one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    return body


def _is_success_code(body: Optional[dict]) -> bool:
    """True only for a numeric `code` equal to SUCCESS_CODE (false is not 0)."""
    if body is None:
        return False
    code = body.get("code")
    return not isinstance(code, bool) and code == SUCCESS_CODE


_submission_service: Optional[KeywordSubmissionService] = None


def get_submission_service() -> KeywordSubmissionService:
    """Get or create KeywordSubmissionService instance."""
    global _submission_service
    if _submission_service is None:
        _submission_service = KeywordSubmissionService(
            endpoint_url=settings.negative_keyword_api_url,
            max_concurrency=settings.max_concurrent_requests,
            timeout_seconds=settings.request_timeout_seconds,
        )
    return _submission_service
