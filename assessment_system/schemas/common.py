"""Common types and enums shared across schemas."""

from enum import Enum


class InsightType(str, Enum):
    """Semantic classification of an insight (not its severity)."""

    GAP = "gap"
    WARNING = "warning"
    OPPORTUNITY = "opportunity"
    STRENGTH = "strength"


# Secondary sort key for insights: gaps first, strengths last
TYPE_RANK: dict[InsightType, int] = {
    InsightType.GAP: 0,
    InsightType.WARNING: 1,
    InsightType.OPPORTUNITY: 2,
    InsightType.STRENGTH: 3,
}

MIN_SEVERITY = 1
MAX_SEVERITY = 5


class ToolId(str, Enum):
    """Identifiers of the assessment tools known to the built-in rules."""

    LEADERSHIP_DNA = "leadership-dna"
    VISION_CANVAS = "vision-canvas"
    SWOT_ANALYSIS = "swot-analysis"
    ROADMAP = "90day-roadmap"
    ADVISOR_READINESS = "advisor-readiness"
    SOP_MATURITY = "sop-maturity"
    AI_READINESS = "ai-readiness"
    BUSINESS_EQ = "business-eq"
    READINESS_CHECK = "readiness-check"
