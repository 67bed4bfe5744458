"""Opportunity-capability match.

Pairs high-confidence opportunities with high-confidence strengths that
share vocabulary. Two keywords match when either contains the other.
"""

from assessment_system.schemas.common import InsightType, ToolId
from assessment_system.schemas.payloads import SWOTData
from assessment_system.synthesis.models import Insight, SynthesisContext
from assessment_system.synthesis.rule import SynthesisRule, extract_keywords

HIGH_CONFIDENCE = 4
KEYWORD_MIN_LENGTH = 3


def keyword_overlap(left: list[str], right: list[str]) -> list[str]:
    """Keywords from ``left`` that contain, or are contained in, a keyword of ``right``."""
    return [k for k in left if any(r in k or k in r for r in right)]


class OpportunityMatchRule(SynthesisRule):
    """Finds opportunities that align with existing strengths."""

    id = "E10-opportunity-capability-match"
    name = "Opportunity-Capability Alignment"
    description = "Finds opportunities that align with existing strengths"
    required_tools = (ToolId.SWOT_ANALYSIS.value,)

    def evaluate(self, context: SynthesisContext) -> list[Insight]:
        swot = self.view(context, ToolId.SWOT_ANALYSIS.value, SWOTData)

        if swot.strengths is None or swot.opportunities is None:
            return []

        opportunities = [o for o in swot.opportunities if o.confidence >= HIGH_CONFIDENCE]
        strengths = [s for s in swot.strengths if s.confidence >= HIGH_CONFIDENCE]

        insights = []
        for opportunity in opportunities:
            opp_keywords = extract_keywords(opportunity.text, KEYWORD_MIN_LENGTH)
            for strength in strengths:
                overlap = keyword_overlap(
                    opp_keywords, extract_keywords(strength.text, KEYWORD_MIN_LENGTH)
                )
                if not overlap:
                    continue

                insights.append(
                    self.insight(
                        type=InsightType.OPPORTUNITY,
                        severity=2,
                        title="Strategic Alignment Found",
                        description=(
                            f'Your strength "{strength.text}" aligns well with opportunity '
                            f'"{opportunity.text}". This combination has high potential '
                            "for success."
                        ),
                        recommendation=(
                            "Consider prioritizing this opportunity since you have an "
                            "existing capability advantage. Build a specific initiative "
                            "around this alignment."
                        ),
                        data={
                            "strengthText": strength.text,
                            "opportunityText": opportunity.text,
                            "alignmentKeywords": overlap,
                        },
                    )
                )

        return insights
