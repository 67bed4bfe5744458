"""Unmitigated threat.

Cross-tool correlation: every high-confidence SWOT threat should be
addressed by at least one 90-day roadmap task. A threat counts as addressed
when any of its keywords appears in the combined task text.
"""

from assessment_system.schemas.common import InsightType, ToolId
from assessment_system.schemas.payloads import RoadmapData, SWOTData
from assessment_system.synthesis.models import Insight, SynthesisContext
from assessment_system.synthesis.rule import SynthesisRule, extract_keywords

HIGH_CONFIDENCE = 4
KEYWORD_MIN_LENGTH = 4


class UnmitigatedThreatRule(SynthesisRule):
    """Identifies high-confidence threats without corresponding action plans."""

    id = "E2-unmitigated-threat"
    name = "Unmitigated Threat Warning"
    description = "Identifies high-confidence threats without corresponding action plans"
    required_tools = (ToolId.SWOT_ANALYSIS.value, ToolId.ROADMAP.value)

    def evaluate(self, context: SynthesisContext) -> list[Insight]:
        swot = self.view(context, ToolId.SWOT_ANALYSIS.value, SWOTData)
        roadmap = self.view(context, ToolId.ROADMAP.value, RoadmapData)

        if swot.threats is None or roadmap.tasks is None:
            return []

        task_text = " ".join(
            f"{task.title} {task.notes or ''}".lower() for task in roadmap.tasks
        )

        insights = []
        for threat in swot.threats:
            if threat.confidence < HIGH_CONFIDENCE:
                continue

            keywords = extract_keywords(threat.text, KEYWORD_MIN_LENGTH)
            if any(keyword in task_text for keyword in keywords):
                continue

            insights.append(
                self.insight(
                    type=InsightType.WARNING,
                    severity=5 if threat.confidence >= 5 else 4,
                    title="Unmitigated Threat",
                    description=(
                        f'High-confidence threat "{threat.text}" (confidence: '
                        f"{threat.confidence}/5) has no corresponding action item in "
                        "your 90-day roadmap."
                    ),
                    recommendation=(
                        "Add a specific task to your roadmap to address this threat. "
                        "Consider: mitigation strategies, contingency planning, or risk "
                        "monitoring."
                    ),
                    data={
                        "threatText": threat.text,
                        "threatConfidence": threat.confidence,
                        "threatId": threat.id,
                    },
                )
            )

        return insights
