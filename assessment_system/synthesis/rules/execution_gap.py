"""Execution capability gap.

Flags strategic ambition that outruns execution capability: the number of
strategic pillars a business can carry scales with its leadership execution
score (execution 10 -> 6 pillars, 5 -> 3, 1 -> 1).
"""

import math

from assessment_system.schemas.common import InsightType, ToolId
from assessment_system.schemas.payloads import LeadershipDNAData, VisionCanvasData
from assessment_system.synthesis.models import Insight, SynthesisContext
from assessment_system.synthesis.rule import SynthesisRule

# Pillars manageable per point of execution score
PILLARS_PER_EXECUTION_POINT = 0.6

# Execution scores at or above this are considered capable of any scope
EXECUTION_CAPABLE_SCORE = 6


def pillar_limit(execution_score: float) -> int:
    """Number of pillars a given execution score can sustain (at least 1)."""
    return max(1, math.floor(execution_score * PILLARS_PER_EXECUTION_POINT))


class ExecutionGapRule(SynthesisRule):
    """Detects mismatch between execution capability and strategic ambition."""

    id = "E1-execution-capability-gap"
    name = "Execution Capability Gap"
    description = "Detects mismatch between execution capability and strategic ambition"
    required_tools = (ToolId.LEADERSHIP_DNA.value, ToolId.VISION_CANVAS.value)

    def evaluate(self, context: SynthesisContext) -> list[Insight]:
        leadership = self.view(context, ToolId.LEADERSHIP_DNA.value, LeadershipDNAData)
        vision = self.view(context, ToolId.VISION_CANVAS.value, VisionCanvasData)

        execution = (leadership.dimensions or {}).get("execution")
        if execution is None or vision.pillars is None:
            return []

        execution_score = execution.current
        pillar_count = len(vision.pillars)
        limit = pillar_limit(execution_score)

        if execution_score >= EXECUTION_CAPABLE_SCORE or pillar_count <= limit:
            return []

        return [
            self.insight(
                type=InsightType.GAP,
                severity=4,
                title="Execution Capability Gap",
                description=(
                    f"Your current execution capability score ({execution_score:g}/10) "
                    f"may not support {pillar_count} strategic pillars. With current "
                    f"execution strength, {limit} pillars would be more manageable."
                ),
                recommendation=(
                    f"Consider: (1) Prioritize to {limit} pillars for near-term focus, "
                    "(2) Invest in execution capabilities before expanding scope, or "
                    "(3) Delegate pillar ownership to reduce personal execution load."
                ),
                data={
                    "executionScore": execution_score,
                    "pillarCount": pillar_count,
                    "recommendedPillars": limit,
                    "gap": pillar_count - limit,
                },
            )
        ]
