"""Shared fixtures and stubs for the analyzer tests."""
import copy

import pytest
from fastapi.testclient import TestClient

from sitecarbon.app import create_app
from sitecarbon.cache import MemoryCache
from sitecarbon.models.schema import GreenHostingResult

SAMPLE_REPORT = {
    "categories": {
        "performance": {"score": 0.87},
        "accessibility": {"score": 0.95},
        "best-practices": {"score": 1},
        "seo": {"score": 0.9},
    },
    "audits": {
        "total-byte-weight": {"numericValue": 1_000_000},
        "first-contentful-paint": {"displayValue": "1.2 s"},
        "speed-index": {"displayValue": "2.3 s"},
        "largest-contentful-paint": {"displayValue": "2.8 s"},
        "interactive": {"displayValue": "3.1 s"},
        "total-blocking-time": {"displayValue": "150 ms"},
        "render-blocking-resources": {
            "title": "Eliminate render-blocking resources",
            "description": "Resources are blocking the first paint of your page.",
            "details": {
                "type": "opportunity",
                "items": [
                    {"url": "https://example.com/app.css", "wastedMs": 320},
                    {"url": "https://example.com/font.css", "wastedMs": 110},
                ],
            },
        },
        "uses-optimized-images": {
            "title": "Efficiently encode images",
            "description": "Optimized images load faster.",
            "details": {"type": "opportunity", "items": [{"url": "https://example.com/a.jpg"}]},
        },
        "dom-size": {
            "title": "Avoids an excessive DOM size",
            "details": {"type": "table", "items": [{"value": 400}]},
        },
    },
}


class StubGreenClient:
    def __init__(self, result=None):
        self.result = result or GreenHostingResult(is_green=True, hosted_by="Acme")
        self.calls = []

    async def check(self, domain):
        self.calls.append(domain)
        return self.result


class StubAuditRunner:
    def __init__(self, report=None, error=None):
        self.report = copy.deepcopy(SAMPLE_REPORT) if report is None else report
        self.error = error
        self.calls = []

    async def run(self, url):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.report


@pytest.fixture
def sample_report():
    return copy.deepcopy(SAMPLE_REPORT)


@pytest.fixture
def green_client():
    return StubGreenClient()


@pytest.fixture
def audit_runner():
    return StubAuditRunner()


@pytest.fixture
def cache():
    return MemoryCache()


@pytest.fixture
def client(cache, green_client, audit_runner):
    app = create_app(
        cache=cache,
        green_client=green_client,
        audit_runner=audit_runner,
        public_dir=None,
    )
    return TestClient(app)
