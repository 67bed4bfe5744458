"""SOP foundation missing.

A North Star metric is only as trustworthy as the processes feeding it.
Flags critical (importance >= 4) process areas with immature SOPs
(maturity < 3) while a North Star metric is being tracked.
"""

from assessment_system.schemas.common import InsightType, ToolId
from assessment_system.schemas.payloads import SOPMaturityData, VisionCanvasData
from assessment_system.synthesis.models import Insight, SynthesisContext
from assessment_system.synthesis.rule import SynthesisRule

CRITICAL_IMPORTANCE = 4
MATURE_LEVEL = 3


class SOPMetricMissingRule(SynthesisRule):
    """Identifies areas where metrics cannot be trusted due to immature processes."""

    id = "E5-sop-metric-missing"
    name = "SOP Foundation Missing"
    description = "Identifies areas where metrics cannot be trusted due to immature processes"
    required_tools = (ToolId.SOP_MATURITY.value, ToolId.VISION_CANVAS.value)

    def evaluate(self, context: SynthesisContext) -> list[Insight]:
        sop = self.view(context, ToolId.SOP_MATURITY.value, SOPMaturityData)
        vision = self.view(context, ToolId.VISION_CANVAS.value, VisionCanvasData)

        if sop.areas is None or vision.north_star is None or not vision.north_star.metric:
            return []

        immature = [
            area
            for area in sop.areas
            if area.importance >= CRITICAL_IMPORTANCE and area.maturity < MATURE_LEVEL
        ]
        if not immature:
            return []

        metric = vision.north_star.metric
        names = ", ".join(area.name for area in immature)

        return [
            self.insight(
                type=InsightType.WARNING,
                severity=4,
                title="Unreliable Metrics Risk",
                description=(
                    f'You\'re tracking "{metric}" as your North Star, but {len(immature)} '
                    f"critical process(es) lack mature SOPs: {names}. Without standardized "
                    "processes, metrics may be inconsistent or misleading."
                ),
                recommendation=(
                    "Prioritize documenting and standardizing these critical processes "
                    "before heavily relying on metrics. Immature processes produce "
                    "unreliable data."
                ),
                data={
                    "northStarMetric": metric,
                    "immatureProcesses": [
                        {"name": a.name, "maturity": a.maturity, "importance": a.importance}
                        for a in immature
                    ],
                },
            )
        ]
