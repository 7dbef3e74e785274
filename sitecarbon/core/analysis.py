import asyncio
import datetime
import logging
from typing import Any, Dict
from urllib.parse import urlsplit

from sitecarbon.core.emissions import estimate_emissions
from sitecarbon.core.suggestions import aggregate_suggestions
from sitecarbon.core.utils import get_safe_value
from sitecarbon.models.schema import (
    AnalysisResponse,
    GreenHostingReport,
    LighthouseScores,
    Metrics,
)

log = logging.getLogger("sitecarbon")

SCORE_PATHS = {
    "performance": "categories.performance.score",
    "accessibility": "categories.accessibility.score",
    "best_practices": "categories.best-practices.score",
    "seo": "categories.seo.score",
}

METRIC_PATHS = {
    "fcp": "audits.first-contentful-paint.displayValue",
    "speed_index": "audits.speed-index.displayValue",
    "lcp": "audits.largest-contentful-paint.displayValue",
    "tti": "audits.interactive.displayValue",
    "total_blocking_time": "audits.total-blocking-time.displayValue",
}


def _score(report: Dict[str, Any], path: str) -> int:
    value = get_safe_value(report, path, 0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return round(value * 100)


def utc_timestamp() -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def analyze_url(url: str, green_client, audit_runner) -> Dict[str, Any]:
    """Run the green lookup and the Lighthouse audit, then assemble the response body."""
    domain = urlsplit(url).hostname
    green, report = await asyncio.gather(
        green_client.check(domain),
        audit_runner.run(url),
    )

    data_transfer_size = get_safe_value(report, "audits.total-byte-weight.numericValue", 0)
    if isinstance(data_transfer_size, bool) or not isinstance(data_transfer_size, (int, float)):
        data_transfer_size = 0

    response = AnalysisResponse(
        url=url,
        emissions=estimate_emissions(data_transfer_size),
        data_transfer_size=data_transfer_size,
        green_hosting=GreenHostingReport(
            **green.model_dump(),
            domain=domain,
            message=(
                "🌱 This website is hosted green!"
                if green.is_green
                else "This website is not hosted green!"
            ),
        ),
        lighthouse_scores=LighthouseScores(
            **{field: _score(report, path) for field, path in SCORE_PATHS.items()}
        ),
        metrics=Metrics(
            **{field: str(get_safe_value(report, path, "N/A")) for field, path in METRIC_PATHS.items()}
        ),
        improvements=aggregate_suggestions(report, green),
        timestamp=utc_timestamp(),
    )
    log.info("Analysis complete for %s (%s g CO2e)", url, response.emissions)
    return response.model_dump(mode="json", by_alias=True)
