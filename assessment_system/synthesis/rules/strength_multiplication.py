"""Compounding advantage.

Counts top-tier scores across leadership (>= 7 of 10), AI readiness
(>= 70%) and the latest business EQ entry (>= 70%). Five or more top-tier
areas compound into a multiplicative advantage.
"""

from assessment_system.schemas.common import InsightType, ToolId
from assessment_system.schemas.payloads import AIReadinessData, BusinessEQData, LeadershipDNAData
from assessment_system.synthesis.models import Insight, SynthesisContext
from assessment_system.synthesis.rule import SynthesisRule

LEADERSHIP_STRONG = 7
PERCENT_STRONG = 70
MIN_STRONG_AREAS = 5
TOP_N = 5


class StrengthMultiplicationRule(SynthesisRule):
    """Detects multiplicative advantages across multiple dimensions."""

    id = "E11-strength-multiplication"
    name = "Compounding Advantage"
    description = "Detects multiplicative advantages across multiple dimensions"
    required_tools = (
        ToolId.LEADERSHIP_DNA.value,
        ToolId.AI_READINESS.value,
        ToolId.BUSINESS_EQ.value,
    )

    def strong_areas(self, context: SynthesisContext) -> list[dict]:
        """All areas crossing their tool's strong cutoff, in scan order."""
        leadership = self.view(context, ToolId.LEADERSHIP_DNA.value, LeadershipDNAData)
        ai = self.view(context, ToolId.AI_READINESS.value, AIReadinessData)
        eq = self.view(context, ToolId.BUSINESS_EQ.value, BusinessEQData)

        areas = []
        for key, dimension in (leadership.dimensions or {}).items():
            if dimension.current >= LEADERSHIP_STRONG:
                areas.append({"area": f"Leadership: {key}", "score": dimension.current})

        for key, value in (ai.dimensions or {}).items():
            if value >= PERCENT_STRONG:
                areas.append({"area": f"AI: {key}", "score": value})

        if eq.entries:
            for key, value in eq.entries[-1].dimensions.items():
                if value >= PERCENT_STRONG:
                    areas.append({"area": f"EQ: {key}", "score": value})

        return areas

    def evaluate(self, context: SynthesisContext) -> list[Insight]:
        areas = self.strong_areas(context)
        if len(areas) < MIN_STRONG_AREAS:
            return []

        top = sorted(areas, key=lambda a: a["score"], reverse=True)[:TOP_N]
        top_names = ", ".join(a["area"] for a in top)

        return [
            self.insight(
                type=InsightType.STRENGTH,
                severity=1,
                title="Compounding Advantages Detected",
                description=(
                    f"You have {len(areas)} areas scoring in the top tier across "
                    "leadership, AI readiness, and emotional intelligence. These create "
                    f"multiplicative advantages: {top_names}."
                ),
                recommendation=(
                    "Leverage these compounding strengths by taking on more ambitious "
                    "strategic initiatives. Your multi-dimensional strength position is "
                    "rare and valuable."
                ),
                data={"totalHighScores": len(areas), "topStrengths": top},
            )
        ]
