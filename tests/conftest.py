"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add project root to Python path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

import json
from io import BytesIO
from typing import Callable, Optional

import httpx
import pandas as pd
import pytest

from models.negative_keyword import TEMPLATE_HEADERS
from services.submission_service import KeywordSubmissionService
from tests.factories import TEST_ENDPOINT


# ===================
# FAKE ADVERTISING API
# ===================

class FakeKeywordApi:
    """
    Fake advertising API behind an httpx.MockTransport.

    Every group is accepted unless a response or an exception is registered
    for its advertiser id.

    Usage:
        def test_something(fake_api):
            fake_api.respond(2, status_code=200, json={"code": 1, "message": "quota exceeded"})
            fake_api.fail(3, httpx.ConnectError("connection refused"))
            service = fake_api.service()
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._responses: dict = {}
        self._errors: dict = {}

    def respond(self, advertiser_id, status_code: int = 200, json=None, content: Optional[bytes] = None):
        self._responses[advertiser_id] = (status_code, json, content)

    def fail(self, advertiser_id, error: Exception):
        self._errors[advertiser_id] = error

    @property
    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        advertiser_id = json.loads(request.content)["advertiser_id"]

        if advertiser_id in self._errors:
            error = self._errors[advertiser_id]
            if isinstance(error, httpx.RequestError):
                error.request = request
            raise error

        if advertiser_id in self._responses:
            status_code, body, content = self._responses[advertiser_id]
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=body)

        return httpx.Response(200, json={"code": 0, "success": True})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def service(self, max_concurrency: int = 10) -> KeywordSubmissionService:
        return KeywordSubmissionService(
            endpoint_url=TEST_ENDPOINT,
            max_concurrency=max_concurrency,
            transport=self.transport(),
        )


@pytest.fixture
def fake_api() -> FakeKeywordApi:
    """Fake API accepting every group by default."""
    return FakeKeywordApi()


# ===================
# SAMPLE DATA
# ===================

@pytest.fixture
def scenario_rows() -> list[dict]:
    """Rows from the reference scenario: a duplicate "free" and two groups."""
    return [
        {"advertiser_id": 1, "unit_id": 10, "keyword": "free", "match_type": 1},
        {"advertiser_id": 1, "unit_id": 10, "keyword": "tutorial", "match_type": 0},
        {"advertiser_id": 1, "unit_id": 10, "keyword": "free", "match_type": 0},
        {"advertiser_id": 2, "unit_id": 20, "keyword": "crack", "match_type": 1},
    ]


@pytest.fixture
def make_workbook() -> Callable[..., BytesIO]:
    """
    Build an .xlsx in memory.

    Usage:
        def test_something(make_workbook):
            file = make_workbook([[1, 10, "free", 1]])
            file = make_workbook(rows, columns=["Advertiser ID", ...])
    """
    def _make(rows: list[list], columns: Optional[list[str]] = None) -> BytesIO:
        if columns is None:
            columns = list(TEMPLATE_HEADERS.values())

        output = BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            pd.DataFrame(rows, columns=columns).to_excel(writer, sheet_name="Sheet1", index=False)
        output.seek(0)
        return output

    return _make


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client():
    """
    Create FastAPI test client.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/api/negative-keywords/template")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
