"""Low readiness alert.

Single-tool threshold rule over the quick readiness check. Also publishes
the readiness dimensions as aggregate scores.
"""

import math

from assessment_system.schemas.common import InsightType, ToolId
from assessment_system.schemas.payloads import ReadinessCheckData
from assessment_system.synthesis.models import Insight, SynthesisContext
from assessment_system.synthesis.rule import SynthesisRule

LOW_AVERAGE = 40
CRITICAL_AVERAGE = 20
MAX_SPREAD = 40


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class LowReadinessRule(SynthesisRule):
    """Detects when the overall readiness score falls below threshold."""

    id = "RC-low-readiness"
    name = "Low Readiness Alert"
    description = "Detects when overall readiness score falls below threshold"
    required_tools = (ToolId.READINESS_CHECK.value,)

    def evaluate(self, context: SynthesisContext) -> list[Insight]:
        check = self.view(context, ToolId.READINESS_CHECK.value, ReadinessCheckData)
        dimensions = {
            "Strategy Alignment": check.strategy_alignment,
            "Operational Readiness": check.operational_readiness,
            "Resource Capacity": check.resource_capacity,
        }
        average = sum(dimensions.values()) / len(dimensions)

        insights = []
        if average < LOW_AVERAGE:
            critical = average < CRITICAL_AVERAGE
            # min() keeps the first of equal values, matching the dimension order above
            weakest = min(dimensions, key=dimensions.get)
            insights.append(
                self.insight(
                    type=InsightType.WARNING,
                    severity=5 if critical else 4,
                    title="Low Overall Readiness Score",
                    description=(
                        f"Your overall readiness score ({_round_half_up(average)}%) "
                        "indicates significant gaps in preparation. "
                        + (
                            "Critical attention needed before proceeding."
                            if critical
                            else "Consider addressing key areas before major initiatives."
                        )
                    ),
                    recommendation=f"Focus on improving your lowest scoring dimension: {weakest}.",
                    data={
                        "avgScore": _round_half_up(average),
                        "strategyAlignment": check.strategy_alignment,
                        "operationalReadiness": check.operational_readiness,
                        "resourceCapacity": check.resource_capacity,
                    },
                )
            )

        highest = max(dimensions.values())
        lowest = min(dimensions.values())
        spread = highest - lowest
        if spread > MAX_SPREAD:
            insights.append(
                self.insight(
                    type=InsightType.GAP,
                    severity=3,
                    title="Dimension Imbalance Detected",
                    description=(
                        f"There's a significant gap ({spread:g} points) between your "
                        "strongest and weakest dimensions. This imbalance may limit "
                        "overall effectiveness."
                    ),
                    recommendation=(
                        "Consider balancing your focus across all dimensions for "
                        "sustainable progress."
                    ),
                    data={"maxScore": highest, "minScore": lowest, "gap": spread},
                )
            )

        return insights

    def calculate_scores(self, context: SynthesisContext) -> dict[str, float]:
        check = self.view(context, ToolId.READINESS_CHECK.value, ReadinessCheckData)
        average = (
            check.strategy_alignment + check.operational_readiness + check.resource_capacity
        ) / 3
        return {
            "overallReadiness": _round_half_up(average),
            "strategyAlignment": check.strategy_alignment,
            "operationalReadiness": check.operational_readiness,
            "resourceCapacity": check.resource_capacity,
        }
