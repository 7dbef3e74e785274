from typing import Any, Dict, Iterable, List

from sitecarbon.core.utils import get_safe_value
from sitecarbon.models.schema import GreenHostingResult, Suggestion

HOSTING_SAVINGS = "Environmental Impact"


def format_savings(wasted_ms: Any) -> str:
    if not wasted_ms or isinstance(wasted_ms, bool) or not isinstance(wasted_ms, (int, float)):
        return "N/A"
    if isinstance(wasted_ms, float) and wasted_ms.is_integer():
        wasted_ms = int(wasted_ms)
    return f"{wasted_ms}ms"


def extract_opportunities(report: Dict[str, Any]) -> List[Suggestion]:
    audits = get_safe_value(report, "audits", {})
    if not isinstance(audits, dict):
        return []

    suggestions = []
    for audit in audits.values():
        if get_safe_value(audit, "details.type") != "opportunity":
            continue
        items = get_safe_value(audit, "details.items", [])
        if not isinstance(items, list):
            continue
        for item in items:
            suggestions.append(Suggestion(
                title=str(get_safe_value(audit, "title", "N/A") or "N/A"),
                description=str(get_safe_value(audit, "description", "N/A") or "N/A"),
                savings=format_savings(get_safe_value(item, "wastedMs")),
                type="info",
            ))
    return suggestions


def remove_duplicate_suggestions(suggestions: Iterable[Suggestion]) -> List[Suggestion]:
    seen_titles = set()
    unique = []
    for suggestion in suggestions:
        if suggestion.title in seen_titles:
            continue
        seen_titles.add(suggestion.title)
        unique.append(suggestion)
    return unique


def hosting_banner(green: GreenHostingResult) -> Suggestion:
    if green.is_green:
        return Suggestion(
            title="🌱 Excellent Green Hosting Choice!",
            description=f"Your website is hosted by {green.hosted_by}, a green hosting provider.",
            savings=HOSTING_SAVINGS,
            type="success",
        )
    return Suggestion(
        title="Consider Green Hosting",
        description=(
            f"Currently hosted by {green.hosted_by}. "
            "Consider switching to a green hosting provider."
        ),
        savings=HOSTING_SAVINGS,
        type="improvement",
    )


def aggregate_suggestions(report: Dict[str, Any], green: GreenHostingResult) -> List[Suggestion]:
    """Hosting banner first, then unique opportunity findings in report order."""
    return [hosting_banner(green)] + remove_duplicate_suggestions(extract_opportunities(report))
