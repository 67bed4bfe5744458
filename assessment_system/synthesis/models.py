"""Data model shared by the synthesis engine and its consumers.

Plain data types only:

- Insight: one atomic, immutable finding produced by a rule
- WorkspaceMeta: lightweight workspace metadata passed to rules
- SynthesisContext: input to a single synthesis pass
- SynthesisResult: output snapshot of a single synthesis pass

``to_dict``/``from_dict`` use the camelCase keys of the stored result
format (``ruleId``, ``affectedTools``, ``rulesEvaluated`` ...).
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

from assessment_system.schemas.common import MAX_SEVERITY, MIN_SEVERITY, InsightType

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# INSIGHT
# =============================================================================


@dataclass(frozen=True)
class Insight:
    """An atomic finding produced by a synthesis rule.

    Insights are never mutated once produced. Consumers that track
    "dismissed" state keep it separately, keyed by ``id``.
    """

    id: str
    rule_id: str
    type: InsightType
    severity: int
    title: str
    description: str
    recommendation: str
    affected_tools: tuple[str, ...] = ()
    data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        try:
            insight_type = InsightType(self.type)
        except ValueError:
            valid = ", ".join(t.value for t in InsightType)
            raise ValueError(
                f"Invalid insight type '{self.type}' from rule {self.rule_id}. "
                f"Valid types: {valid}"
            ) from None
        object.__setattr__(self, "type", insight_type)

        if isinstance(self.severity, bool) or not isinstance(self.severity, int):
            raise ValueError(
                f"Insight severity must be an integer, got {self.severity!r} "
                f"from rule {self.rule_id}"
            )
        if not MIN_SEVERITY <= self.severity <= MAX_SEVERITY:
            raise ValueError(
                f"Insight severity must be between {MIN_SEVERITY} and {MAX_SEVERITY}, "
                f"got {self.severity} from rule {self.rule_id}"
            )

        # Ordered set: keep first occurrence of each tool id
        object.__setattr__(self, "affected_tools", tuple(dict.fromkeys(self.affected_tools)))
        # Private deep copy behind a read-only view
        object.__setattr__(
            self, "data", MappingProxyType(copy.deepcopy(dict(self.data or {})))
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "ruleId": self.rule_id,
            "type": self.type.value,
            "severity": self.severity,
            "title": self.title,
            "description": self.description,
            "recommendation": self.recommendation,
            "affectedTools": list(self.affected_tools),
            "data": copy.deepcopy(dict(self.data)),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Insight:
        return cls(
            id=data["id"],
            rule_id=data["ruleId"],
            type=data["type"],
            severity=data["severity"],
            title=data["title"],
            description=data["description"],
            recommendation=data["recommendation"],
            affected_tools=tuple(data.get("affectedTools", ())),
            data=data.get("data") or {},
        )


# =============================================================================
# CONTEXT
# =============================================================================


@dataclass(frozen=True)
class WorkspaceMeta:
    """Workspace metadata available to every rule."""

    company_name: str = "Unknown Company"
    assessment_date: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"companyName": self.company_name, "assessmentDate": self.assessment_date}


@dataclass
class SynthesisContext:
    """Input to a single synthesis pass.

    ``tools`` maps tool id to that tool's opaque payload. A tool whose
    payload is ``None`` counts as absent.
    """

    tools: Mapping[str, Any] = field(default_factory=dict)
    meta: WorkspaceMeta = field(default_factory=WorkspaceMeta)

    def __post_init__(self) -> None:
        if self.tools is None:
            self.tools = {}
        elif not isinstance(self.tools, Mapping):
            logger.warning(
                "Synthesis context tools is a %s, not a mapping; treating as no tools",
                type(self.tools).__name__,
            )
            self.tools = {}

    def has_tool(self, tool_id: str) -> bool:
        """Return True if the tool has a defined payload."""
        return self.tools.get(tool_id) is not None

    @property
    def available_tool_ids(self) -> list[str]:
        return [tool_id for tool_id, payload in self.tools.items() if payload is not None]


# =============================================================================
# RESULT
# =============================================================================


@dataclass
class SynthesisResult:
    """Snapshot produced by one synthesis pass.

    Recomputed wholesale on every pass; callers replace any previously
    stored result instead of merging into it.
    """

    insights: list[Insight] = field(default_factory=list)
    scores: dict[str, float] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_utcnow)
    rules_evaluated: int = 0
    rules_skipped: list[str] = field(default_factory=list)
    rules_failed: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "insights": [insight.to_dict() for insight in self.insights],
            "scores": dict(self.scores),
            "timestamp": self.timestamp.isoformat(),
            "rulesEvaluated": self.rules_evaluated,
            "rulesSkipped": list(self.rules_skipped),
            "rulesFailed": list(self.rules_failed),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SynthesisResult:
        timestamp = data.get("timestamp")
        return cls(
            insights=[Insight.from_dict(i) for i in data.get("insights", [])],
            scores=dict(data.get("scores", {})),
            timestamp=datetime.fromisoformat(timestamp) if timestamp else _utcnow(),
            rules_evaluated=int(data.get("rulesEvaluated", 0)),
            rules_skipped=list(data.get("rulesSkipped", [])),
            rules_failed=list(data.get("rulesFailed", [])),
        )
