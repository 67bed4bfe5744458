"""Custom Jinja2 filters for report rendering."""

import re
from datetime import datetime

from assessment_system.schemas.common import InsightType
from assessment_system.synthesis.dashboard import SEVERITY_LABELS, TYPE_LABELS

TYPE_HEADINGS: dict[InsightType, str] = {
    InsightType.GAP: "Gaps",
    InsightType.WARNING: "Warnings",
    InsightType.OPPORTUNITY: "Opportunities",
    InsightType.STRENGTH: "Strengths",
}


def severity_label(value: int) -> str:
    """Human label for a 1-5 severity (e.g., 5 -> "Critical")."""
    return SEVERITY_LABELS.get(value, str(value))


def type_label(value: InsightType | str) -> str:
    """Human label for an insight type (e.g., "gap" -> "Gap")."""
    return TYPE_LABELS[InsightType(value)]


def type_heading(value: InsightType | str) -> str:
    """Section heading for an insight type (e.g., "opportunity" -> "Opportunities")."""
    return TYPE_HEADINGS[InsightType(value)]


def format_score(value: float) -> str:
    """Format a score without trailing zeros (e.g., 70.0 -> "70", 2.456 -> "2.46")."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    return f"{round(float(value), 2):g}"


def format_date(value: datetime | str) -> str:
    """Format a datetime or ISO-8601 string as YYYY-MM-DD.

    Values that are not dates are returned unchanged.
    """
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d")
    try:
        return datetime.fromisoformat(str(value)).strftime("%Y-%m-%d")
    except ValueError:
        return str(value)


def humanize(value: str) -> str:
    """Turn a camelCase or snake_case key into words (e.g., "overallReadiness" -> "Overall readiness")."""
    words = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", value).replace("_", " ").replace("-", " ")
    words = words.lower().strip()
    return words[:1].upper() + words[1:]


CUSTOM_FILTERS = {
    "severity_label": severity_label,
    "type_label": type_label,
    "type_heading": type_heading,
    "format_score": format_score,
    "format_date": format_date,
    "humanize": humanize,
}
