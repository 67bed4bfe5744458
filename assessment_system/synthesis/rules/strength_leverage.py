"""Untapped strength.

A high-confidence SWOT strength should show up somewhere in the strategy:
in a pillar title/description or a core value.
"""

from assessment_system.schemas.common import InsightType, ToolId
from assessment_system.schemas.payloads import SWOTData, VisionCanvasData
from assessment_system.synthesis.models import Insight, SynthesisContext
from assessment_system.synthesis.rule import SynthesisRule, extract_keywords

HIGH_CONFIDENCE = 4
KEYWORD_MIN_LENGTH = 4


class StrengthLeverageRule(SynthesisRule):
    """Identifies high-confidence strengths not leveraged in strategy."""

    id = "E4-strength-leverage"
    name = "Untapped Strength Opportunity"
    description = "Identifies high-confidence strengths not leveraged in strategy"
    required_tools = (ToolId.SWOT_ANALYSIS.value, ToolId.VISION_CANVAS.value)

    def evaluate(self, context: SynthesisContext) -> list[Insight]:
        swot = self.view(context, ToolId.SWOT_ANALYSIS.value, SWOTData)
        vision = self.view(context, ToolId.VISION_CANVAS.value, VisionCanvasData)

        if swot.strengths is None or vision.pillars is None:
            return []

        pillar_text = " ".join(f"{p.title} {p.description}" for p in vision.pillars)
        values_text = " ".join(vision.core_values or [])
        strategic_text = f"{pillar_text} {values_text}".lower()

        insights = []
        for strength in swot.strengths:
            if strength.confidence < HIGH_CONFIDENCE:
                continue

            keywords = extract_keywords(strength.text, KEYWORD_MIN_LENGTH)
            if any(keyword in strategic_text for keyword in keywords):
                continue

            insights.append(
                self.insight(
                    type=InsightType.OPPORTUNITY,
                    severity=3,
                    title="Untapped Strength",
                    description=(
                        f'High-confidence strength "{strength.text}" '
                        f"({strength.confidence}/5) doesn't appear to be reflected in "
                        "your strategic pillars or core values."
                    ),
                    recommendation=(
                        "Consider how this strength could inform a strategic pillar, "
                        "differentiate your value proposition, or accelerate existing "
                        "initiatives."
                    ),
                    data={
                        "strengthText": strength.text,
                        "strengthConfidence": strength.confidence,
                        "strengthId": strength.id,
                    },
                )
            )

        return insights
