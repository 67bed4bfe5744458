"""Read-only helpers for presenting synthesis results.

Consumers receive insights already ordered by the engine; every helper here
preserves that order. Dismissal is tracked separately by insight id and
never touches the insights themselves.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

from assessment_system.schemas.common import InsightType
from assessment_system.synthesis.models import Insight, SynthesisResult

SEVERITY_LABELS: dict[int, str] = {
    5: "Critical",
    4: "High",
    3: "Medium",
    2: "Low",
    1: "Info",
}

TYPE_LABELS: dict[InsightType, str] = {
    InsightType.GAP: "Gap",
    InsightType.WARNING: "Warning",
    InsightType.OPPORTUNITY: "Opportunity",
    InsightType.STRENGTH: "Strength",
}


def filter_insights(
    insights: Iterable[Insight],
    type: Optional[InsightType | str] = None,
    severity: Optional[int] = None,
    dismissed: Iterable[str] = (),
) -> list[Insight]:
    """Filter insights by type, exact severity and dismissal."""
    wanted_type = InsightType(type) if type is not None else None
    dismissed_ids = set(dismissed)
    return [
        insight
        for insight in insights
        if insight.id not in dismissed_ids
        and (wanted_type is None or insight.type == wanted_type)
        and (severity is None or insight.severity == severity)
    ]


def insights_for_tool(insights: Iterable[Insight], tool_id: str) -> list[Insight]:
    return [insight for insight in insights if tool_id in insight.affected_tools]


def group_by_tool(insights: Iterable[Insight]) -> dict[str, list[Insight]]:
    """Map each affected tool id to the insights that mention it."""
    groups: dict[str, list[Insight]] = {}
    for insight in insights:
        for tool_id in insight.affected_tools:
            groups.setdefault(tool_id, []).append(insight)
    return groups


def group_by_type(insights: Iterable[Insight]) -> dict[InsightType, list[Insight]]:
    """Map every insight type (in rank order) to its insights."""
    groups: dict[InsightType, list[Insight]] = {t: [] for t in InsightType}
    for insight in insights:
        groups[insight.type].append(insight)
    return groups


def skipped_summary(result: SynthesisResult) -> str:
    """A constructive one-liner about rules waiting for more data."""
    skipped = len(result.rules_skipped)
    if skipped == 0:
        return "All rules had the data they need."
    noun = "rule" if skipped == 1 else "rules"
    return f"{skipped} {noun} skipped pending more data"


@dataclass
class InsightStats:
    """Counts shown in the dashboard header."""

    total: int = 0
    by_type: dict[str, int] = field(default_factory=dict)
    critical: int = 0
    medium: int = 0
    low: int = 0

    @classmethod
    def from_insights(
        cls, insights: Iterable[Insight], dismissed: Iterable[str] = ()
    ) -> InsightStats:
        active = filter_insights(insights, dismissed=dismissed)
        return cls(
            total=len(active),
            by_type={t.value: sum(1 for i in active if i.type == t) for t in InsightType},
            critical=sum(1 for i in active if i.severity >= 4),
            medium=sum(1 for i in active if i.severity == 3),
            low=sum(1 for i in active if i.severity <= 2),
        )


@dataclass
class DismissalState:
    """User-dismissed insight ids."""

    dismissed: list[str] = field(default_factory=list)

    def dismiss(self, insight_id: str) -> None:
        if insight_id not in self.dismissed:
            self.dismissed.append(insight_id)

    def is_dismissed(self, insight_id: str) -> bool:
        return insight_id in self.dismissed

    def restore_all(self) -> int:
        """Clear all dismissals and return how many were restored."""
        restored = len(self.dismissed)
        self.dismissed.clear()
        return restored

    def active(self, insights: Iterable[Insight]) -> list[Insight]:
        return filter_insights(insights, dismissed=self.dismissed)
